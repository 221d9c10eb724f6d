from typing import Any

import requests
from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request

from silkworm_monitor.core.config import Settings
from silkworm_monitor.schemas import (
    AlertKind,
    AlertListResponse,
    DashboardSnapshot,
    ReadingOut,
    SourceConfig,
    Thresholds,
)
from silkworm_monitor.services import DeviceClient, DeviceSource, Monitor, ParamsSource, describe_reading

router = APIRouter()


def get_monitor(request: Request) -> Monitor:
    return request.app.state.monitor


def get_params_source(request: Request) -> ParamsSource:
    return request.app.state.params_source


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def _normalize_source_mode(mode: str) -> str:
    normalized = mode.strip().lower()
    if normalized not in {"params", "device"}:
        raise HTTPException(status_code=400, detail="mode must be either 'params' or 'device'")
    return normalized


def _serialize_source(monitor: Monitor, params_source: ParamsSource) -> SourceConfig:
    source = monitor.source
    return SourceConfig(
        mode=source.mode,
        device_base_url=source.base_url if isinstance(source, DeviceSource) else None,
        params=params_source.params,
    )


@router.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/sensor/latest", response_model=ReadingOut)
def get_latest_reading(monitor: Monitor = Depends(get_monitor)) -> ReadingOut:
    latest = monitor.state.latest
    if latest is None:
        raise HTTPException(status_code=404, detail="No sensor reading available yet")
    return describe_reading(latest, monitor.thresholds)


@router.post("/sensor/refresh", response_model=DashboardSnapshot)
def refresh_reading(monitor: Monitor = Depends(get_monitor)) -> DashboardSnapshot:
    try:
        monitor.poll_once()
    except requests.RequestException as exc:
        raise HTTPException(status_code=502, detail=f"Failed to fetch device data: {exc}") from exc
    return monitor.snapshot()


@router.get("/sensor/source", response_model=SourceConfig)
def get_source(
    monitor: Monitor = Depends(get_monitor),
    params_source: ParamsSource = Depends(get_params_source),
) -> SourceConfig:
    return _serialize_source(monitor, params_source)


@router.put("/sensor/source", response_model=SourceConfig)
def update_source(
    payload: dict[str, Any] = Body(...),
    monitor: Monitor = Depends(get_monitor),
    params_source: ParamsSource = Depends(get_params_source),
    config: Settings = Depends(get_settings),
) -> SourceConfig:
    if "mode" not in payload:
        raise HTTPException(status_code=400, detail="mode is required")

    mode = _normalize_source_mode(str(payload["mode"]))
    if mode == "device":
        base_url = str(payload.get("device_base_url") or config.device_base_url)
        monitor.set_source(DeviceSource(DeviceClient(base_url, config.device_timeout)))
    elif monitor.source is not params_source:
        monitor.set_source(params_source)
    return _serialize_source(monitor, params_source)


@router.put("/sensor/params", response_model=SourceConfig)
def update_params(
    payload: dict[str, Any] = Body(...),
    monitor: Monitor = Depends(get_monitor),
    params_source: ParamsSource = Depends(get_params_source),
) -> SourceConfig:
    params_source.update({str(key): str(value) for key, value in payload.items() if value is not None})
    return _serialize_source(monitor, params_source)


@router.get("/alerts", response_model=AlertListResponse)
def get_alerts(
    kind: AlertKind | None = Query(default=None),
    monitor: Monitor = Depends(get_monitor),
) -> AlertListResponse:
    snapshot = monitor.snapshot()
    alerts = snapshot.alerts
    if kind:
        alerts = [alert for alert in alerts if alert.kind == kind]
    return AlertListResponse(items=alerts, count=len(alerts), active=snapshot.has_active_alerts)


@router.get("/thresholds", response_model=Thresholds)
def get_thresholds(monitor: Monitor = Depends(get_monitor)) -> Thresholds:
    return monitor.thresholds


@router.get("/dashboard", response_model=DashboardSnapshot)
def get_dashboard(monitor: Monitor = Depends(get_monitor)) -> DashboardSnapshot:
    return monitor.snapshot()
