import os
import pytest
from terrainprofile.config import get_settings
from terrainprofile.services.metadata_cache import get_metadata_cache

def pytest_configure():
    os.environ.setdefault("PROFILE_LOG_LEVEL", "DEBUG")

@pytest.fixture(autouse=True)
def _reset_process_caches():
    # evita fuga de estado entre tests
    get_settings.cache_clear()
    get_metadata_cache.cache_clear()
    yield
    get_settings.cache_clear()
    get_metadata_cache.cache_clear()

def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in item.keywords and os.environ.get("CI") == "true":
            item.add_marker(pytest.mark.slow)
