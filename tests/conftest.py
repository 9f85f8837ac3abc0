"""Pytest configuration shared across the suite."""

import pytest

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

from analytics.core.config import get_settings


@pytest.fixture(autouse=True)
def _reset_settings_cache():
    """Settings are cached per process; tests that patch env need a fresh copy."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
