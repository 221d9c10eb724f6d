from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

StatusTier = Literal["critical", "warning", "caution", "normal"]


class Thresholds(BaseModel):
    model_config = ConfigDict(frozen=True)

    high_humidity: float = 85
    low_humidity: float = 40
    low_water: int = 200
    moderate_water: int = 400
    high_temp: float = 30
    low_temp: float = 20


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True)

    temp: float = Field(..., description="Temperature in Celsius")
    humidity: float = Field(..., description="Relative humidity percentage")
    water: int = Field(..., description="Raw water level (0-1024 ADC)")
    ir: Literal[0, 1] = Field(..., description="IR sensor, 0 = motion detected")
    timestamp: datetime


class Status(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    tier: StatusTier


class ReadingOut(BaseModel):
    reading: Reading
    humidity_status: Status
    temperature_status: Status
    water_status: Status
    motion: Literal["Detected", "Clear"]


class SourceConfig(BaseModel):
    mode: Literal["params", "device"]
    device_base_url: str | None = None
    params: dict[str, str] = Field(default_factory=dict)
