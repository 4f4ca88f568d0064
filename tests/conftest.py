# tests/conftest.py
import os
import pytest
from fastapi.testclient import TestClient
from redis.exceptions import ConnectionError as RedisConnectionError

# Keep the process-wide backend local and quiet for tests (read once at import of app.config).
os.environ.pop("REDIS_URL", None)
os.environ.setdefault("ENABLE_CACHE", "true")

from app.main import app  # import after env is set
from app.config import ProcessConfig, get_config
from app.services.cache_backends import FileCache
from app.services.cache_factory import get_file_cache


# ---------- Minimal in-memory stand-in for redis.asyncio.Redis ----------

class FakeRedis:
    """Implements the subset of the redis.asyncio client used by RedisCache."""
    def __init__(self):
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.closed = False

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        if ex:
            self.ttls[key] = ex
        else:
            self.ttls.pop(key, None)
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def aclose(self):
        self.closed = True


class BrokenRedis:
    """Every call fails the way an unreachable server does."""
    async def get(self, key):
        raise RedisConnectionError("Connection refused")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("Connection refused")

    async def delete(self, *keys):
        raise RedisConnectionError("Connection refused")

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def broken_redis():
    return BrokenRedis()


@pytest.fixture
def make_config():
    """Build a ProcessConfig with test-friendly defaults (cache on, non-production)."""
    def _make(**overrides):
        values = {"enable_cache": True, "is_production": False}
        values.update(overrides)
        return ProcessConfig(**values)
    return _make


@pytest.fixture
def file_cache(tmp_path):
    return FileCache(tmp_path / "cache")


@pytest.fixture(scope="function")
def client():
    """A FastAPI TestClient for calling API endpoints; dependency overrides are reset after each test."""
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def override_app(file_cache):
    """Point the app at a temp file cache and a given config."""
    def _override(config: ProcessConfig):
        app.dependency_overrides[get_config] = lambda: config
        app.dependency_overrides[get_file_cache] = lambda: file_cache
        return file_cache
    yield _override
    app.dependency_overrides.clear()
