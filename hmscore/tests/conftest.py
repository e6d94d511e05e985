import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def clear_cache():
    # throttles and the staffing stats share the default cache
    cache.clear()
    yield
    cache.clear()
