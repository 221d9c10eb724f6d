from silkworm_monitor.schemas.alert import Alert, AlertKind, AlertListResponse
from silkworm_monitor.schemas.dashboard import DashboardSnapshot
from silkworm_monitor.schemas.sensor import Reading, ReadingOut, SourceConfig, Status, Thresholds

__all__ = [
    "Alert",
    "AlertKind",
    "AlertListResponse",
    "DashboardSnapshot",
    "Reading",
    "ReadingOut",
    "SourceConfig",
    "Status",
    "Thresholds",
]
