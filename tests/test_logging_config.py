import logging

import pytest

from wish_lighthouse_api.app.core.logging_config import APP_LOGGER, resolve_level, setup_logging


@pytest.fixture
def restore_app_level():
    app_logger = logging.getLogger(APP_LOGGER)
    previous = app_logger.level
    yield app_logger
    app_logger.setLevel(previous)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("debug", logging.DEBUG),
        ("WARNING", logging.WARNING),
        ("loud", logging.INFO),
        ("", logging.INFO),
        (None, logging.INFO),
        ("basicConfig", logging.INFO),
    ],
)
def test_resolve_level(name, expected):
    assert resolve_level(name) == expected


def test_level_applies_on_every_call(restore_app_level):
    assert setup_logging("DEBUG") == logging.DEBUG
    assert restore_app_level.level == logging.DEBUG
    assert setup_logging("ERROR") == logging.ERROR
    assert restore_app_level.level == logging.ERROR


def test_service_loggers_follow_level(restore_app_level):
    setup_logging("WARNING")
    service_logger = logging.getLogger("wish_lighthouse_api.app.services.wish_service")
    assert not service_logger.isEnabledFor(logging.INFO)
    assert service_logger.isEnabledFor(logging.WARNING)
