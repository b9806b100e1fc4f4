import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _reset_throttle_cache() -> None:
    """DRF throttles count in the default cache; start every test from zero."""
    cache.clear()
