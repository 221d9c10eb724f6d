from silkworm_monitor.utils.logger import setup_logging

__all__ = ["setup_logging"]
