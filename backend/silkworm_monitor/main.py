import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from silkworm_monitor.api import router
from silkworm_monitor.core import THRESHOLDS, Settings, settings
from silkworm_monitor.services import DeviceClient, DeviceSource, Monitor, ParamsSource
from silkworm_monitor.utils.logger import setup_logging

logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))


def create_app(config: Settings = settings) -> FastAPI:
    app = FastAPI(
        title="Silkworm IoT Monitor API",
        version="2.0.0",
        description="Polls enclosure sensors, classifies them against fixed thresholds and keeps recent alerts.",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    params_source = ParamsSource.from_query_string(config.initial_params)
    if config.reading_source.strip().lower() == "device":
        source = DeviceSource(DeviceClient(config.device_base_url, config.device_timeout))
    else:
        source = params_source

    app.state.settings = config
    app.state.params_source = params_source
    app.state.monitor = Monitor(
        source,
        THRESHOLDS,
        poll_interval_seconds=config.poll_interval_seconds,
    )

    app.include_router(router, prefix="/api")

    @app.on_event("startup")
    async def on_startup() -> None:
        app.state.monitor.start()

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        await app.state.monitor.stop()

    @app.get("/")
    def root() -> dict[str, str]:
        return {"message": "Silkworm monitor backend is running", "docs": "/docs"}

    return app


app = create_app()


if __name__ == "__main__":
    setup_logging()
    uvicorn.run(app, host=settings.host, port=settings.port)
