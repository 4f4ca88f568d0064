# app/config.py
import os
from dataclasses import dataclass
from typing import Optional

# Read once at process start; change via environment variables.
#   REDIS_URL: remote cache connection string; when set, Redis is the active backend
#   ENABLE_CACHE: global read/delete switch ("true"/"false"); defaults to on during build/export
#   ENABLE_FILE_CACHE: use the local file backend when Redis is not configured
#   LIFECYCLE_EVENT: process phase ("build", "export", ...); falls back to npm_lifecycle_event
#   APP_ENV: "production" marks a production deployment
#   CACHE_DIR: directory for the file backend
#   CACHE_TTL_SECONDS: default per-entry TTL; 0 means no expiration
#   CACHE_CLEAN_SECRET: shared secret for the cache clean endpoint; unset leaves it open

BUILD_PHASES = frozenset({"build", "export"})
_TRUTHY = {"1", "true", "yes", "on"}


def _flag(value: Optional[str]) -> bool:
    return (value or "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class ProcessConfig:
    """Process-wide cache configuration, built once and passed to selector, guard and facade."""
    redis_url: Optional[str] = None
    enable_cache: bool = False
    enable_file_cache: bool = False
    lifecycle_phase: Optional[str] = None
    is_production: bool = False
    cache_dir: str = "./.cache/data"
    cache_ttl_seconds: int = 0
    cache_clean_secret: Optional[str] = None

    @property
    def is_build_phase(self) -> bool:
        return self.lifecycle_phase in BUILD_PHASES


def load_config(environ=None) -> ProcessConfig:
    env = os.environ if environ is None else environ

    phase = env.get("LIFECYCLE_EVENT") or env.get("npm_lifecycle_event") or None
    enable_cache_raw = env.get("ENABLE_CACHE")
    if enable_cache_raw is None or enable_cache_raw.strip() == "":
        enable_cache = phase in BUILD_PHASES
    else:
        enable_cache = _flag(enable_cache_raw)

    return ProcessConfig(
        redis_url=(env.get("REDIS_URL") or "").strip() or None,
        enable_cache=enable_cache,
        enable_file_cache=_flag(env.get("ENABLE_FILE_CACHE")),
        lifecycle_phase=phase,
        is_production=(env.get("APP_ENV") or "").strip().lower() == "production",
        cache_dir=env.get("CACHE_DIR") or "./.cache/data",
        cache_ttl_seconds=int(env.get("CACHE_TTL_SECONDS") or "0"),
        cache_clean_secret=env.get("CACHE_CLEAN_SECRET") or None,
    )


settings = load_config()


def get_config() -> ProcessConfig:
    """FastAPI dependency returning the process configuration."""
    return settings
