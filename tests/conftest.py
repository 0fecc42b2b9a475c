"""
Shared fixtures for structural serializer tests
"""

import pytest

from structural_serializer import set_default_config


@pytest.fixture(autouse=True)
def restore_default_config():
    """Tests that change the default configuration must not leak it"""
    yield
    set_default_config(None)
