"""Error response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Uniform body for every non-2xx JSON response."""

    error: ErrorDetail
    request_id: str | None = None
    timestamp: datetime = Field(..., description="When the error occurred")
