import logging

from taskforce.utils.log_once import log_once, reset_log_once


def test_logs_each_key_once(caplog):
    reset_log_once()
    with caplog.at_level(logging.WARNING, logger="taskforce.utils.log_once"):
        assert log_once("token", "missing %s", "token", level=logging.WARNING) is True
        assert log_once("token", "missing %s", "token", level=logging.WARNING) is False
        assert log_once("other", "second problem", level=logging.WARNING) is True
    assert [r.getMessage() for r in caplog.records] == ["missing token", "second problem"]


def test_reset_allows_logging_again():
    reset_log_once()
    assert log_once("k", "x") is True
    reset_log_once()
    assert log_once("k", "x") is True
