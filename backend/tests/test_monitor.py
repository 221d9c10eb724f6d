import asyncio
import logging
import threading
import time

import pytest
import requests

from conftest import NOW
from silkworm_monitor.services import Monitor, ParamsSource


class FailingSource:
    mode = "device"

    def read(self):
        raise requests.ConnectionError("device offline")


@pytest.fixture
def monitor(thresholds):
    return Monitor(ParamsSource({"temp": "35", "ir": "0", "humidity": "60", "water": "500"}), thresholds)


def test_poll_updates_reading_and_log(monitor):
    alerts = monitor.poll_once(now=NOW)

    assert [alert.label for alert in alerts] == ["High Temperature", "Motion Detected"]
    assert monitor.state.latest.temp == 35.0
    assert monitor.state.last_update == NOW
    assert len(monitor.state.alert_log) == 2


def test_repeated_polls_repeat_alerts(monitor):
    for _ in range(6):
        monitor.poll_once(now=NOW)

    assert len(monitor.state.alert_log) == 10


def test_clean_reading_keeps_previous_alerts(monitor):
    monitor.poll_once(now=NOW)
    monitor.source.update({"temp": "25", "humidity": "60", "water": "500", "ir": "1"})

    assert monitor.poll_once(now=NOW) == []
    assert len(monitor.state.alert_log) == 2
    assert monitor.state.latest.temp == 25.0


def test_failed_poll_keeps_last_reading(monitor, caplog):
    monitor.poll_once(now=NOW)
    monitor.set_source(FailingSource())

    with caplog.at_level(logging.WARNING), pytest.raises(requests.RequestException):
        monitor.poll_once()

    assert monitor.state.latest.temp == 35.0
    assert monitor.state.last_error == "device offline"
    assert "keeping last reading" in caplog.text


def test_alerts_are_logged(monitor, caplog):
    with caplog.at_level(logging.INFO, logger="silkworm_monitor"):
        monitor.poll_once(now=NOW)

    assert "High Temperature" in caplog.text


def test_snapshot_before_first_poll(monitor):
    snapshot = monitor.snapshot()

    assert snapshot.current is None
    assert snapshot.alerts == []
    assert snapshot.buzzer == "Off"
    assert snapshot.critical_banner is False
    assert snapshot.source_mode == "params"


def test_snapshot_reports_critical_humidity(thresholds):
    monitor = Monitor(ParamsSource({"humidity": "92", "water": "500"}), thresholds)
    monitor.poll_once(now=NOW)

    snapshot = monitor.snapshot()

    assert snapshot.critical_banner is True
    assert snapshot.buzzer == "ACTIVE"
    assert snapshot.has_active_alerts is True
    assert snapshot.current.humidity_status.text == "CRITICAL"
    assert snapshot.current.water_status.text == "Good"
    assert snapshot.current.motion == "Clear"


def test_alert_log_is_capped_at_ten(thresholds):
    monitor = Monitor(ParamsSource({"ir": "0"}), thresholds)

    for _ in range(12):
        monitor.poll_once(now=NOW)

    assert monitor.state.alert_log.max_size == 10
    assert len(monitor.state.alert_log) == 10


def test_poll_loop_runs_until_stopped(thresholds):
    monitor = Monitor(ParamsSource({"humidity": "90", "water": "500"}), thresholds, poll_interval_seconds=0.01)

    async def scenario():
        monitor.start()
        assert monitor.running
        await asyncio.sleep(0.2)
        await monitor.stop()

    asyncio.run(scenario())

    assert monitor.running is False
    assert monitor.state.latest is not None
    assert monitor.state.alert_log.items[0].label == "HIGH HUMIDITY ALERT"


def test_poll_loop_survives_source_errors(thresholds):
    monitor = Monitor(FailingSource(), thresholds, poll_interval_seconds=0.01)

    async def scenario():
        monitor.start()
        await asyncio.sleep(0.1)
        assert monitor.running
        await monitor.stop()

    asyncio.run(scenario())

    assert monitor.state.latest is None
    assert monitor.state.last_error == "device offline"


class SwitchingSource:
    """Replaces itself on the monitor while its read is in flight."""

    mode = "device"

    def __init__(self, monitor, replacement, error=None):
        self.monitor = monitor
        self.replacement = replacement
        self.error = error

    def read(self):
        self.monitor.set_source(self.replacement)
        if self.error is not None:
            raise self.error
        return {"humidity": "95", "water": "500"}


def test_reading_from_replaced_source_is_dropped(thresholds):
    params = ParamsSource({"water": "500", "humidity": "60"})
    monitor = Monitor(params, thresholds)
    monitor.set_source(SwitchingSource(monitor, params))

    assert monitor.poll_once(now=NOW) == []
    assert monitor.state.latest is None
    assert len(monitor.state.alert_log) == 0
    assert monitor.source is params


def test_failure_from_replaced_source_is_not_recorded(thresholds, caplog):
    params = ParamsSource({"water": "500", "humidity": "60"})
    monitor = Monitor(params, thresholds)
    monitor.set_source(SwitchingSource(monitor, params, error=requests.ConnectionError("device offline")))

    with caplog.at_level(logging.INFO), pytest.raises(requests.RequestException):
        monitor.poll_once()

    assert monitor.state.last_error is None
    assert "Ignoring failure from replaced device source" in caplog.text


def test_failure_is_logged_against_failing_source(thresholds, caplog):
    monitor = Monitor(FailingSource(), thresholds)

    with caplog.at_level(logging.WARNING), pytest.raises(requests.RequestException):
        monitor.poll_once()

    assert "Reading source device failed" in caplog.text


def test_slow_read_finishing_after_switch_is_dropped(thresholds):
    release = threading.Event()
    started = threading.Event()

    class SlowSource:
        mode = "device"

        def read(self):
            started.set()
            release.wait(5)
            return {"humidity": "95", "water": "500"}

    params = ParamsSource({"humidity": "60", "water": "500"})
    monitor = Monitor(SlowSource(), thresholds, poll_interval_seconds=60)

    async def scenario():
        monitor.start()
        while not started.is_set():
            await asyncio.sleep(0.01)
        monitor.set_source(params)
        release.set()
        await asyncio.sleep(0.2)
        await monitor.stop()

    asyncio.run(scenario())

    assert monitor.state.latest is None
    assert monitor.state.last_error is None
    assert len(monitor.state.alert_log) == 0


def test_poll_loop_keeps_a_fixed_period(thresholds, monkeypatch):
    delays = []
    real_sleep = asyncio.sleep

    class SlowSource:
        mode = "params"

        def read(self):
            time.sleep(0.2)
            return {"humidity": "60", "water": "500"}

    async def recording_sleep(delay):
        delays.append(delay)
        await real_sleep(0)

    monitor = Monitor(SlowSource(), thresholds, poll_interval_seconds=5)

    async def scenario():
        monitor.start()
        while not delays:
            await real_sleep(0.01)
        await monitor.stop()

    monkeypatch.setattr(asyncio, "sleep", recording_sleep)
    asyncio.run(scenario())

    assert 4.0 < delays[0] < 4.9
