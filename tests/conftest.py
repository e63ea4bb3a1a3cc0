"""Shared pytest fixtures."""

import pytest
from factories import make_settings

from storefront_bridge.config import Settings


@pytest.fixture()
def settings() -> Settings:
    return make_settings()
