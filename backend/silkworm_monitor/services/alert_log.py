from typing import Iterable

from silkworm_monitor.schemas.alert import Alert

DEFAULT_MAX_SIZE = 10


class AlertLog:
    """Newest-first alert history, truncated to ``max_size`` on every insert."""

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        if max_size < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = max_size
        self._items: list[Alert] = []

    def append(self, new_alerts: Iterable[Alert]) -> None:
        batch = list(new_alerts)
        if not batch:
            return
        self._items = (batch + self._items)[: self.max_size]

    @property
    def items(self) -> list[Alert]:
        return list(self._items)

    @property
    def has_active_alerts(self) -> bool:
        return any(alert.kind in {"critical", "warning"} for alert in self._items)

    def __len__(self) -> int:
        return len(self._items)
