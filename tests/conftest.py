"""Shared fixtures for the marshaler tests."""
import pytest

from xmlmarshal.config.settings import MarshalerOptions


@pytest.fixture
def options():
    """Marshaler options with metrics disabled."""
    return MarshalerOptions(enable_metrics=False)
