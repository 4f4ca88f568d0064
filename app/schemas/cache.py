# app/schemas/cache.py

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


class CacheStatusResponse(BaseModel):
    """Body returned by the cache clean endpoint."""
    status: Literal["success", "error"] = Field(..., description="Outcome of the operation")
    message: str = Field(..., description="Human readable outcome")

    model_config = ConfigDict(
        json_schema_extra={"example": {"status": "success", "message": "Clean cache successful!"}}
    )


class HealthResponse(BaseModel):
    status: Literal["ok"] = "ok"
    backend: str = Field(..., description="Active cache backend: memory, file or redis")
    cacheEnabled: bool = Field(..., description="Whether cache reads are globally enabled")
