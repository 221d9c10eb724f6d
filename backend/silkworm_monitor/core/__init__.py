from silkworm_monitor.core.config import Settings, settings
from silkworm_monitor.core.thresholds import THRESHOLDS

__all__ = ["Settings", "settings", "THRESHOLDS"]
