"""
schemas/common.py

- Schemas shared across the project (Pydantic v2)
- Contents:
  1) Error response standard: ErrorDetail, ErrorResponse
  2) Success envelope helpers: ok(), pagination()
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, Field, ConfigDict


# =========================================================
# 1) 에러 응답 표준
# =========================================================

class ErrorDetail(BaseModel):
    """Smallest unit carrying an error code and message"""
    code: str = Field(..., description="error code (e.g. NOT_FOUND, VALIDATION_ERROR)")
    message: str = Field(..., description="human readable message")
    details: Optional[Any] = Field(default=None, description="offending fields or failing bulk rows")

class ErrorResponse(BaseModel):
    """
    Standard error body returned by the global handlers
    (middlewares/error_handler.py)
    """
    error: ErrorDetail
    generated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="response time (UTC)"
    )
    latency_ms: Optional[int] = Field(
        default=None, ge=0, description="request latency in ms, from the timing middleware"
    )
    trace_id: Optional[str] = Field(
        default=None, description="copied from X-Request-ID when present"
    )

    model_config = ConfigDict(extra="ignore")


# =========================================================
# 2) 성공 응답
# =========================================================

def ok(data: Any, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def pagination(total: int, page: int, limit: int) -> dict:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "pages": math.ceil(total / limit) if limit else 0,
    }
