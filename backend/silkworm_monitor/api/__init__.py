from silkworm_monitor.api.routes import router

__all__ = ["router"]
