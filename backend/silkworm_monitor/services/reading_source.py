import math
import re
from datetime import datetime, timezone
from typing import Any, Mapping, Protocol
from urllib.parse import parse_qsl

from silkworm_monitor.schemas.sensor import Reading
from silkworm_monitor.services.device_client import DeviceClient

DEFAULT_TEMP = 25.0
DEFAULT_HUMIDITY = 0.0
DEFAULT_WATER = 0
DEFAULT_IR = 1

# Leading number only, trailing text such as units is ignored ("31.5C", "90%").
FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")
INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def _parse_float(raw: Any, default: float) -> float:
    if raw is None:
        return default
    match = FLOAT_PREFIX.match(str(raw))
    if match is None:
        return default
    value = float(match.group(1))
    if not math.isfinite(value):
        return default
    return value


def _parse_int(raw: Any, default: int) -> int:
    if raw is None:
        return default
    match = INT_PREFIX.match(str(raw))
    if match is None:
        return default
    return int(match.group(1))


def parse_reading(params: Mapping[str, Any], now: datetime | None = None) -> Reading:
    """Build a reading from a string-keyed input, falling back to defaults.

    Each field is read from its leading number, so units after it are
    ignored. Absent, unparsable and non-finite fields take their default. ``ir`` is
    0 (motion) only when it parses to zero; any other number means clear.
    """
    ir = _parse_int(params.get("ir"), DEFAULT_IR)
    return Reading(
        temp=_parse_float(params.get("temp"), DEFAULT_TEMP),
        humidity=_parse_float(params.get("humidity"), DEFAULT_HUMIDITY),
        water=_parse_int(params.get("water"), DEFAULT_WATER),
        ir=0 if ir == 0 else 1,
        timestamp=now or datetime.now(timezone.utc),
    )


class ReadingSource(Protocol):
    mode: str

    def read(self) -> Mapping[str, Any]: ...


class ParamsSource:
    """Key-value input held in memory, set through the API like URL parameters."""

    mode = "params"

    def __init__(self, params: Mapping[str, str] | None = None) -> None:
        self._params: dict[str, str] = dict(params or {})

    @classmethod
    def from_query_string(cls, query: str) -> "ParamsSource":
        params: dict[str, str] = {}
        for key, value in parse_qsl(query.lstrip("?")):
            params.setdefault(key, value)
        return cls(params)

    def update(self, params: Mapping[str, str]) -> None:
        self._params = dict(params)

    @property
    def params(self) -> dict[str, str]:
        return dict(self._params)

    def read(self) -> Mapping[str, Any]:
        return dict(self._params)


class DeviceSource:
    mode = "device"

    def __init__(self, client: DeviceClient) -> None:
        self.client = client

    @property
    def base_url(self) -> str:
        return self.client.base_url

    def read(self) -> Mapping[str, Any]:
        return self.client.fetch_current_data()
