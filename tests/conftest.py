"""Shared fixtures for wavematch tests."""

from __future__ import annotations

import pytest

from wavematch import Registry, RegistryBuilder
from wavematch.testing import register


@pytest.fixture
def registry() -> Registry:
    """Registry with the sample guards and type tags from wavematch.testing."""
    return register(RegistryBuilder()).build()
