import pytest

from conftest import make_alert
from silkworm_monitor.services import AlertLog


def test_empty_batch_leaves_log_unchanged():
    log = AlertLog()
    log.append([make_alert("a"), make_alert("b")])
    before = log.items

    log.append([])

    assert log.items == before
    assert len(log) == 2


def test_batch_is_prepended_in_order():
    log = AlertLog()
    log.append([make_alert("old")])

    log.append([make_alert("first"), make_alert("second")])

    assert [alert.label for alert in log.items] == ["first", "second", "old"]


def test_keeps_ten_most_recent_newest_first():
    log = AlertLog()

    for index in range(11):
        log.append([make_alert(f"alert-{index}")])

    assert len(log) == 10
    assert [alert.label for alert in log.items] == [f"alert-{index}" for index in range(10, 0, -1)]


def test_large_batch_is_truncated():
    log = AlertLog(max_size=3)

    log.append([make_alert(str(index)) for index in range(5)])

    assert [alert.label for alert in log.items] == ["0", "1", "2"]


def test_repeated_alerts_are_not_deduplicated():
    log = AlertLog()

    log.append([make_alert("Low Water Level")])
    log.append([make_alert("Low Water Level")])

    assert len(log) == 2


def test_items_returns_a_copy():
    log = AlertLog()
    log.append([make_alert("a")])

    log.items.clear()

    assert len(log) == 1


def test_active_alerts_ignore_info():
    log = AlertLog()
    log.append([make_alert("Motion Detected", kind="info")])
    assert log.has_active_alerts is False

    log.append([make_alert("HIGH HUMIDITY ALERT", kind="critical")])
    assert log.has_active_alerts is True


def test_invalid_size_is_rejected():
    with pytest.raises(ValueError):
        AlertLog(max_size=0)
