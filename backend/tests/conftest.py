from datetime import datetime, timezone

import pytest

from silkworm_monitor.core import THRESHOLDS
from silkworm_monitor.schemas import Alert, Reading

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)


def make_reading(temp=25.0, humidity=60.0, water=500, ir=1):
    return Reading(temp=temp, humidity=humidity, water=water, ir=ir, timestamp=NOW)


def make_alert(label, kind="warning"):
    return Alert(kind=kind, label=label, message="test", occurred_at=NOW)


@pytest.fixture
def thresholds():
    return THRESHOLDS
