from datetime import datetime, timezone

from silkworm_monitor.schemas.alert import Alert, AlertKind
from silkworm_monitor.schemas.sensor import Reading, Thresholds


def _limit(value: float) -> str:
    return f"{value:g}"


def _rules(reading: Reading, thresholds: Thresholds) -> list[tuple[bool, AlertKind, str, str, str]]:
    return [
        (
            reading.humidity > thresholds.high_humidity,
            "critical",
            "🚨",
            "HIGH HUMIDITY ALERT",
            f"{reading.humidity:.1f}% (Limit: {_limit(thresholds.high_humidity)}%)",
        ),
        (
            reading.humidity < thresholds.low_humidity,
            "warning",
            "⚠️",
            "Low Humidity Warning",
            f"{reading.humidity:.1f}% (Minimum: {_limit(thresholds.low_humidity)}%)",
        ),
        (
            reading.water < thresholds.low_water,
            "warning",
            "💧",
            "Low Water Level",
            f"{reading.water} (Minimum: {_limit(thresholds.low_water)})",
        ),
        (
            reading.temp > thresholds.high_temp,
            "warning",
            "🌡️",
            "High Temperature",
            f"{reading.temp:.1f}°C (Max: {_limit(thresholds.high_temp)}°C)",
        ),
        (
            reading.temp < thresholds.low_temp,
            "warning",
            "🌡️",
            "Low Temperature",
            f"{reading.temp:.1f}°C (Min: {_limit(thresholds.low_temp)}°C)",
        ),
        (reading.ir == 0, "info", "👁️", "Motion Detected", "IR sensor triggered"),
    ]


def evaluate(reading: Reading, thresholds: Thresholds, now: datetime | None = None) -> list[Alert]:
    """Return the alerts raised by a single reading, in rule order.

    Rules are independent, so one reading can raise several alerts at once
    (for example high temperature together with motion).
    """
    occurred_at = now or datetime.now(timezone.utc)

    alerts: list[Alert] = []
    for triggered, kind, icon, label, message in _rules(reading, thresholds):
        if not triggered:
            continue
        alerts.append(Alert(kind=kind, label=label, message=message, occurred_at=occurred_at, icon=icon))

    return alerts
