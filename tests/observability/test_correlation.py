import logging

from session_manager.observability.correlation import (
    clear_correlation_id,
    get_correlation_id,
    set_correlation_id,
)
from session_manager.observability.logger import CorrelationIdFilter


def test_set_correlation_id_uses_given_value():
    assert set_correlation_id("req-1") == "req-1"
    assert get_correlation_id() == "req-1"
    clear_correlation_id()


def test_set_correlation_id_generates_when_missing():
    value = set_correlation_id()
    assert value
    assert get_correlation_id() == value
    clear_correlation_id()


def test_clear_correlation_id():
    set_correlation_id("req-2")
    clear_correlation_id()
    assert get_correlation_id() == ""


def test_filter_attaches_correlation_id():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    set_correlation_id("req-3")
    try:
        assert CorrelationIdFilter().filter(record) is True
    finally:
        clear_correlation_id()

    assert record.correlation_id == "req-3"


def test_filter_outside_request_uses_placeholder():
    record = logging.LogRecord("test", logging.INFO, __file__, 1, "msg", None, None)

    CorrelationIdFilter().filter(record)

    assert record.correlation_id == "-"
