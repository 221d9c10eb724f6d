from silkworm_monitor.services.alert_engine import evaluate
from silkworm_monitor.services.alert_log import AlertLog
from silkworm_monitor.services.device_client import DeviceClient
from silkworm_monitor.services.monitor import Monitor, MonitorState, describe_reading
from silkworm_monitor.services.reading_source import DeviceSource, ParamsSource, parse_reading
from silkworm_monitor.services.status import (
    buzzer_status,
    humidity_status,
    motion_status,
    temperature_status,
    water_status,
)

__all__ = [
    "AlertLog",
    "DeviceClient",
    "DeviceSource",
    "Monitor",
    "MonitorState",
    "ParamsSource",
    "buzzer_status",
    "describe_reading",
    "evaluate",
    "humidity_status",
    "motion_status",
    "parse_reading",
    "temperature_status",
    "water_status",
]
