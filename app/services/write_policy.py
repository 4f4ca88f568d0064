from typing import Optional

from app.config import BUILD_PHASES


def may_write_local(lifecycle_phase: Optional[str], is_remote_backend: bool, is_production: bool = True) -> bool:
    """
    Decide whether a cache write may be persisted.

    Remote backends are always writable: they are shared and outlive the process.
    Memory/file backends are only written during build/export or outside production.
    In a serverless production deployment each request may land on a fresh instance,
    so per-process writes buy nothing and can fail on a read-only filesystem.
    """
    if is_remote_backend:
        return True
    return lifecycle_phase in BUILD_PHASES or not is_production
