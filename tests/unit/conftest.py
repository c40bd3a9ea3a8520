"""Configuration for unit tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def setup_logging(caplog):
    """Capture debug logs of the client package."""
    caplog.set_level(logging.DEBUG, logger="google_photos_client")
    yield
