"""Shared pytest fixtures for the device model tests."""

import logging
from unittest.mock import Mock

import pytest

from gateway_addon.domain.device.device import Device


@pytest.fixture
def notifier() -> Mock:
    """Stub device exposing only the two notification entry points."""
    stub = Mock(spec=["notify_property_changed", "action_notify"])
    return stub


@pytest.fixture
def device() -> Device:
    return Device("test-device-1", "Test device", type_=["OnOffSwitch"])


@pytest.fixture
def events(device: Device) -> list:
    received = []
    device.subscribe(received.append)
    return received


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield root_logger
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
