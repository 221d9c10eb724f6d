import asyncio
import contextlib
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

import requests

from silkworm_monitor.schemas.alert import Alert
from silkworm_monitor.schemas.dashboard import DashboardSnapshot
from silkworm_monitor.schemas.sensor import Reading, ReadingOut, Thresholds
from silkworm_monitor.services.alert_engine import evaluate
from silkworm_monitor.services.alert_log import DEFAULT_MAX_SIZE, AlertLog
from silkworm_monitor.services.reading_source import ReadingSource, parse_reading
from silkworm_monitor.services.status import (
    buzzer_status,
    humidity_status,
    motion_status,
    temperature_status,
    water_status,
)

logger = logging.getLogger(__name__)


@dataclass
class MonitorState:
    latest: Reading | None = None
    alert_log: AlertLog = field(default_factory=AlertLog)
    last_update: datetime | None = None
    last_error: str | None = None


def describe_reading(reading: Reading, thresholds: Thresholds) -> ReadingOut:
    return ReadingOut(
        reading=reading,
        humidity_status=humidity_status(reading, thresholds),
        temperature_status=temperature_status(reading, thresholds),
        water_status=water_status(reading, thresholds),
        motion=motion_status(reading),
    )


class Monitor:
    """Owns the session state and the timer task that polls the reading source.

    The alert log is always capped at ``DEFAULT_MAX_SIZE`` entries.
    """

    def __init__(
        self,
        source: ReadingSource,
        thresholds: Thresholds,
        poll_interval_seconds: float = 5.0,
    ) -> None:
        self.source = source
        self.thresholds = thresholds
        self.poll_interval_seconds = poll_interval_seconds
        self.state = MonitorState(alert_log=AlertLog(DEFAULT_MAX_SIZE))
        self._lock = threading.Lock()
        self._task: asyncio.Task | None = None

    def set_source(self, source: ReadingSource) -> None:
        with self._lock:
            self.source = source
            self.state.last_error = None
        logger.info("Reading source switched to %s", source.mode)

    def apply(
        self,
        raw: Mapping[str, Any],
        now: datetime | None = None,
        source: ReadingSource | None = None,
    ) -> list[Alert]:
        """Evaluate ``raw`` and record it. Reads from a replaced source are dropped."""
        reading = parse_reading(raw, now=now)
        alerts = evaluate(reading, self.thresholds, now=reading.timestamp)

        with self._lock:
            if source is not None and source is not self.source:
                logger.info("Dropping reading from replaced %s source", source.mode)
                return []
            self.state.latest = reading
            self.state.alert_log.append(alerts)
            self.state.last_update = reading.timestamp
            self.state.last_error = None

        logger.debug(
            "Reading temp=%.1f humidity=%.1f water=%d ir=%d",
            reading.temp,
            reading.humidity,
            reading.water,
            reading.ir,
        )
        for alert in alerts:
            logger.info("Alert [%s] %s: %s", alert.kind, alert.label, alert.message)
        return alerts

    def record_failure(self, exc: Exception, source: ReadingSource | None = None) -> None:
        failed = source or self.source
        with self._lock:
            stale = source is not None and source is not self.source
            if not stale:
                self.state.last_error = str(exc)
        if stale:
            logger.info("Ignoring failure from replaced %s source: %s", failed.mode, exc)
            return
        logger.warning("Reading source %s failed, keeping last reading: %s", failed.mode, exc)

    def poll_once(self, now: datetime | None = None) -> list[Alert]:
        """Read, evaluate and log once. Source errors propagate to the caller."""
        source = self.source
        try:
            raw = source.read()
        except requests.RequestException as exc:
            self.record_failure(exc, source)
            raise
        return self.apply(raw, now=now, source=source)

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        while True:
            started = loop.time()
            source = self.source
            try:
                raw = await asyncio.to_thread(source.read)
            except requests.RequestException as exc:
                self.record_failure(exc, source)
            else:
                self.apply(raw, source=source)
            elapsed = loop.time() - started
            await asyncio.sleep(max(0.0, self.poll_interval_seconds - elapsed))

    def start(self) -> None:
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.info("Polling %s source every %ss", self.source.mode, self.poll_interval_seconds)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Polling stopped")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def snapshot(self) -> DashboardSnapshot:
        with self._lock:
            latest = self.state.latest
            alerts = self.state.alert_log.items
            has_active = self.state.alert_log.has_active_alerts
            last_update = self.state.last_update
            last_error = self.state.last_error
            source_mode = self.source.mode

        return DashboardSnapshot(
            current=describe_reading(latest, self.thresholds) if latest else None,
            alerts=alerts,
            has_active_alerts=has_active,
            buzzer=buzzer_status(latest, self.thresholds) if latest else "Off",
            critical_banner=bool(latest and latest.humidity > self.thresholds.high_humidity),
            thresholds=self.thresholds,
            last_update=last_update,
            last_error=last_error,
            poll_interval_seconds=self.poll_interval_seconds,
            source_mode=source_mode,
        )
