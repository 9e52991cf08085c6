import logging

import pytest

from dtcc_lift.common import get_logger, get_python_logger, log_level, set_log_level


def test_error_raises():
    _, _, _, error, _ = get_logger("dtcc-lift")
    with pytest.raises(RuntimeError, match="broken"):
        error("broken")


def test_set_log_level():
    logger = get_python_logger("dtcc-lift")
    set_log_level("WARNING")
    try:
        assert logger.level == logging.WARNING
    finally:
        set_log_level(logging.INFO)
    assert logger.level == logging.INFO


def test_invalid_level():
    with pytest.raises(ValueError):
        set_log_level("LOUD")


def test_messages_are_captured(lift_log):
    debug, info, warning, _, _ = get_logger("dtcc-lift")
    info("lifting")
    warning("careful")
    assert "lifting" in lift_log.text
    assert "careful" in lift_log.text


def test_log_level_context(lift_log):
    debug, _, _, _, _ = get_logger("dtcc-lift")
    debug("hidden")
    with log_level("DEBUG"):
        debug("shown")
    debug("hidden again")
    assert "shown" in lift_log.text
    assert "hidden" not in lift_log.text
    assert get_python_logger("dtcc-lift").level == logging.INFO
