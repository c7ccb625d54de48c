import pytest

from servicearea.api import routes
from servicearea.config.settings import get_settings

_ENV_VARS = [
    "SERVICEAREA_CONFIG_PATH",
    "SERVICEAREA_LOG_LEVEL",
    "SERVICEAREA_CENTER_LAT",
    "SERVICEAREA_CENTER_LON",
    "SERVICEAREA_RADIUS_MILES",
    "MAPBOX_ACCESS_TOKEN",
]

# Captured at import so teardown still reaches the cached functions when a test
# has monkeypatched them away.
_CACHED = [get_settings, routes.get_evaluator, routes._geocoder]


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    # Settings and the evaluator are lru_cached per process; tests tweak env, so reset both.
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    for fn in _CACHED:
        fn.cache_clear()
    yield
    for fn in _CACHED:
        fn.cache_clear()
