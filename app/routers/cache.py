# app/routers/cache.py

import logging
import secrets
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse

from app.config import ProcessConfig, get_config
from app.schemas.cache import CacheStatusResponse
from app.services.cache_backends import FileCache
from app.services.cache_factory import get_file_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["cache"])


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def _authorized(secret: Optional[str], token: Optional[str], authorization: Optional[str]) -> bool:
    # No secret configured: endpoint is open.
    if not secret:
        return True
    for candidate in (token, _bearer_token(authorization)):
        if candidate and secrets.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8")):
            return True
    return False


@router.api_route("/cache", methods=["GET", "POST"], response_model=CacheStatusResponse)
def clean_cache(
    token: Optional[str] = Query(None),
    authorization: Optional[str] = Header(None),
    config: ProcessConfig = Depends(get_config),
    file_cache: FileCache = Depends(get_file_cache),
):
    """
    GET|POST /api/cache
    Removes every entry of the local file cache.

    Status codes:
      - 200: cache cleared
      - 400: cleanup failed (filesystem error)
      - 401: CACHE_CLEAN_SECRET is set and neither ?token= nor a Bearer header matches it

    When CACHE_CLEAN_SECRET is unset the endpoint is open to anyone who can reach it.
    """
    if not _authorized(config.cache_clean_secret, token, authorization):
        logger.warning("cache: rejected unauthorized clean request")
        return JSONResponse(status_code=401, content={"status": "error", "message": "Unauthorized"})

    result = file_cache.clear()
    if result.is_error:
        return JSONResponse(status_code=400, content={"status": "error", "message": "Clean cache failed!"})

    return CacheStatusResponse(status="success", message="Clean cache successful!")
