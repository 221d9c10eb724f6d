import os
from typing import Any

import pandas as pd
import plotly.graph_objects as go
import requests
import streamlit as st
from streamlit_autorefresh import st_autorefresh


DEFAULT_BACKEND_URL = os.getenv("BACKEND_API_URL", "http://localhost:8000/api")
REQUEST_TIMEOUT = 8
SENSOR_KEYS = ("temp", "humidity", "water", "ir")

TIER_COLORS = {
    "critical": "#dc2626",
    "warning": "#ca8a04",
    "caution": "#ca8a04",
    "normal": "#16a34a",
}


st.set_page_config(page_title="Silkworm IoT Monitor", layout="wide")


def api_get(base_url: str, path: str) -> tuple[dict[str, Any] | None, str | None]:
    try:
        response = requests.get(f"{base_url}{path}", timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json(), None
    except requests.RequestException as exc:
        return None, str(exc)


def api_post(base_url: str, path: str, payload: dict[str, Any] | None = None) -> tuple[dict[str, Any] | None, str | None]:
    try:
        response = requests.post(f"{base_url}{path}", json=payload or {}, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        if response.content:
            return response.json(), None
        return {}, None
    except requests.RequestException as exc:
        return None, str(exc)


def api_put(base_url: str, path: str, payload: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
    try:
        response = requests.put(f"{base_url}{path}", json=payload, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json(), None
    except requests.RequestException as exc:
        return None, str(exc)


def gauge(title: str, value: float, max_value: float, suffix: str, color: str) -> go.Figure:
    fig = go.Figure(
        go.Indicator(
            mode="gauge+number",
            value=value,
            number={"suffix": suffix},
            title={"text": title},
            gauge={"axis": {"range": [0, max_value]}, "bar": {"color": color}},
        )
    )
    fig.update_layout(height=220, margin={"l": 20, "r": 20, "t": 50, "b": 10})
    return fig


def format_time(value: str | None) -> str:
    if not value:
        return "-"
    return pd.to_datetime(value).strftime("%H:%M:%S")


st.title("Silkworm IoT Monitor")
st.caption("Real-time monitoring of the enclosure with threshold alerts")

with st.sidebar:
    st.header("Settings")
    backend_url = st.text_input("Backend API URL", value=DEFAULT_BACKEND_URL)
    auto_refresh = st.checkbox("Auto refresh", value=True)

# Sensor values in the page URL (?temp=35&ir=0) feed the params source.
url_params = {key: st.query_params.get_all(key)[0] for key in SENSOR_KEYS if key in st.query_params}
if url_params and url_params != st.session_state.get("sent_url_params"):
    _, params_error = api_put(backend_url, "/sensor/params", url_params)
    if params_error:
        st.error(f"Sending URL parameters failed: {params_error}")
    else:
        st.session_state["sent_url_params"] = url_params
        api_post(backend_url, "/sensor/refresh")

if st.button("Refresh"):
    _, refresh_error = api_post(backend_url, "/sensor/refresh")
    if refresh_error:
        st.error(f"Refresh failed: {refresh_error}")

snapshot, snapshot_error = api_get(backend_url, "/dashboard")
if snapshot_error:
    st.error(f"Backend unavailable: {snapshot_error}")
    st.stop()

if auto_refresh:
    st_autorefresh(interval=int(snapshot["poll_interval_seconds"] * 1000), key="monitor-refresh")

st.caption(f"Last updated: {format_time(snapshot['last_update'])} | Source: {snapshot['source_mode']}")
if snapshot["last_error"]:
    st.warning(f"Sensor source error, showing last good reading: {snapshot['last_error']}")

thresholds = snapshot["thresholds"]
current = snapshot["current"]

if current is None:
    st.info("Waiting for the first sensor reading")
    st.stop()

reading = current["reading"]

if snapshot["critical_banner"]:
    st.error(
        f"🚨 CRITICAL: High Humidity Alert! Current: {reading['humidity']:.1f}% | "
        f"Limit: {thresholds['high_humidity']:g}%"
    )

left, right = st.columns([2, 1])

with left:
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("Temperature", f"{reading['temp']:.1f} °C", current["temperature_status"]["text"])
    m2.metric("Humidity", f"{reading['humidity']:.1f}%", current["humidity_status"]["text"])
    m3.metric("Water Level", f"{reading['water']}", current["water_status"]["text"])
    m4.metric("Motion", current["motion"], f"IR value {reading['ir']}")

    g1, g2, g3 = st.columns(3)
    g1.plotly_chart(
        gauge("Temperature", reading["temp"], 40, "°C", TIER_COLORS[current["temperature_status"]["tier"]]),
        use_container_width=True,
    )
    g2.plotly_chart(
        gauge("Humidity", reading["humidity"], 100, "%", TIER_COLORS[current["humidity_status"]["tier"]]),
        use_container_width=True,
    )
    g3.plotly_chart(
        gauge("Water", reading["water"], 1024, "", TIER_COLORS[current["water_status"]["tier"]]),
        use_container_width=True,
    )

    st.caption(
        f"Safe ranges: temperature {thresholds['low_temp']:g}-{thresholds['high_temp']:g} °C, "
        f"humidity {thresholds['low_humidity']:g}-{thresholds['high_humidity']:g}%, "
        f"water minimum {thresholds['low_water']}"
    )

    st.subheader("System Status")
    s1, s2 = st.columns(2)
    s1.write(f"Buzzer: {snapshot['buzzer']}")
    s2.write("Telegram: label only")

with right:
    header = "Recent Alerts"
    if snapshot["has_active_alerts"]:
        header = f"{header} (Active)"
    st.subheader(header)

    alerts = snapshot["alerts"]
    if not alerts:
        st.success("No alerts. All systems normal")
    else:
        df = pd.DataFrame(alerts)
        df["time"] = df["occurred_at"].map(format_time)
        df["alert"] = df["icon"] + " " + df["label"]
        st.dataframe(df[["time", "kind", "alert", "message"]], hide_index=True, use_container_width=True)

st.caption(
    f"Auto-refresh: {snapshot['poll_interval_seconds']:g}s | Alerts are not rate limited; "
    "repeated readings log repeated alerts"
)
