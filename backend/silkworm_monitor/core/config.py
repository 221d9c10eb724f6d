import os
from dataclasses import dataclass


@dataclass(frozen=True)
class Settings:
    environment: str = os.getenv("ENVIRONMENT", "development")
    debug: bool = os.getenv("DEBUG", "true").lower() == "true"
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "8000"))
    cors_origins_raw: str = os.getenv("CORS_ORIGINS", "http://localhost:8501")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    poll_interval_seconds: float = float(os.getenv("POLL_INTERVAL_SECONDS", "5"))
    reading_source: str = os.getenv("READING_SOURCE", "params")
    device_base_url: str = os.getenv("DEVICE_BASE_URL", "http://192.168.1.50")
    device_timeout: int = int(os.getenv("DEVICE_TIMEOUT", "5"))
    initial_params: str = os.getenv("INITIAL_PARAMS", "")

    @property
    def cors_origins(self) -> list[str]:
        return [item.strip() for item in self.cors_origins_raw.split(",") if item.strip()]


settings = Settings()
