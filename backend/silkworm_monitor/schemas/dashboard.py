from datetime import datetime
from typing import Literal

from pydantic import BaseModel

from silkworm_monitor.schemas.alert import Alert
from silkworm_monitor.schemas.sensor import ReadingOut, Thresholds


class DashboardSnapshot(BaseModel):
    current: ReadingOut | None
    alerts: list[Alert]
    has_active_alerts: bool
    buzzer: Literal["ACTIVE", "Off"]
    critical_banner: bool
    thresholds: Thresholds
    last_update: datetime | None
    last_error: str | None
    poll_interval_seconds: float
    source_mode: Literal["params", "device"]
