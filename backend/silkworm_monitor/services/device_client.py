from typing import Any

import requests


class DeviceClient:
    """HTTP client for the enclosure's ESP8266 telemetry endpoint."""

    def __init__(self, base_url: str, timeout: int) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def fetch_current_data(self) -> dict[str, Any]:
        response = requests.get(f"{self.base_url}/data", timeout=self.timeout)
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise requests.RequestException(f"Device returned a non-JSON body: {exc}") from exc
        if not isinstance(payload, dict):
            raise requests.RequestException("Device returned JSON that is not an object")
        return payload
