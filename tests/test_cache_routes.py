# tests/test_cache_routes.py
import asyncio

from app.config import ProcessConfig

SECRET = "s3cret"


def _seed(file_cache, *keys):
    for key in keys:
        asyncio.run(file_cache.set(key, {"key": key}))


def _entries(file_cache):
    return sorted(p.name for p in file_cache.directory.iterdir())


def test_clean_with_query_token(client, override_app):
    file_cache = override_app(ProcessConfig(cache_clean_secret=SECRET))
    _seed(file_cache, "post:1", "post:2")

    res = client.get(f"/api/cache?token={SECRET}")
    assert res.status_code == 200
    assert res.json() == {"status": "success", "message": "Clean cache successful!"}
    assert _entries(file_cache) == []


def test_clean_with_bearer_header(client, override_app):
    file_cache = override_app(ProcessConfig(cache_clean_secret=SECRET))
    _seed(file_cache, "post:1")

    res = client.post("/api/cache", headers={"Authorization": f"Bearer {SECRET}"})
    assert res.status_code == 200
    assert _entries(file_cache) == []


def test_clean_rejects_wrong_or_missing_token(client, override_app):
    file_cache = override_app(ProcessConfig(cache_clean_secret=SECRET))
    _seed(file_cache, "post:1")
    before = _entries(file_cache)

    for kwargs in (
        {},
        {"params": {"token": "wrong"}},
        {"headers": {"Authorization": "Bearer wrong"}},
        {"headers": {"Authorization": f"Basic {SECRET}"}},
    ):
        res = client.get("/api/cache", **kwargs)
        assert res.status_code == 401
        assert res.json()["status"] == "error"

    assert _entries(file_cache) == before


def test_clean_is_open_without_configured_secret(client, override_app):
    file_cache = override_app(ProcessConfig())
    _seed(file_cache, "post:1")

    res = client.get("/api/cache")
    assert res.status_code == 200
    assert _entries(file_cache) == []


def test_clean_on_empty_cache_succeeds(client, override_app):
    override_app(ProcessConfig())
    res = client.get("/api/cache")
    assert res.status_code == 200
    assert res.json()["status"] == "success"


def test_clean_failure_returns_400(client, override_app, monkeypatch):
    file_cache = override_app(ProcessConfig())
    _seed(file_cache, "post:1")

    def _broken_iterdir(self):
        raise PermissionError("read-only filesystem")

    monkeypatch.setattr(type(file_cache.directory), "iterdir", _broken_iterdir)
    res = client.get("/api/cache")
    assert res.status_code == 400
    assert res.json() == {"status": "error", "message": "Clean cache failed!"}


def test_health_reports_backend(client):
    res = client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "ok"
    assert body["backend"] in {"memory", "file", "redis"}
    assert isinstance(body["cacheEnabled"], bool)
