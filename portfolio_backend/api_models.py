"""
API response models for consistent API responses
"""
from typing import List, Optional, Generic, TypeVar
from pydantic import BaseModel, Field
from datetime import datetime, timezone

T = TypeVar('T')


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ErrorResponse(BaseModel):
    """Error response model"""
    success: bool = Field(False, description="Always false for errors")
    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utcnow, description="Error timestamp")
    request_id: Optional[str] = Field(None, description="Request tracking ID")


class PaginatedResponse(BaseModel, Generic[T]):
    """Paginated response wrapper"""
    items: List[T] = Field(..., description="List of items")
    total: Optional[int] = Field(None, description="Total number of items (if available)")
    offset: int = Field(0, description="Current offset")
    limit: Optional[int] = Field(None, description="Items per page limit")
    has_more: Optional[bool] = Field(None, description="Whether there are more items")


class HealthResponse(BaseModel):
    """Health check response"""
    status: str = Field(..., description="Health status (healthy, degraded, unhealthy)")
    version: str = Field(..., description="Application version")
    timestamp: datetime = Field(default_factory=_utcnow, description="Health check timestamp")
    checks: dict = Field(default_factory=dict, description="Individual health check results")


def error_response(
    error_code: str,
    message: str,
    details: Optional[dict] = None,
    request_id: Optional[str] = None
) -> ErrorResponse:
    """Create an error response"""
    return ErrorResponse(
        error=error_code,
        message=message,
        details=details,
        request_id=request_id
    )


def paginated_response(
    items: List[T],
    offset: int = 0,
    limit: Optional[int] = None,
    total: Optional[int] = None
) -> PaginatedResponse[T]:
    """Create a paginated response"""
    has_more = None
    if total is not None:
        has_more = offset + len(items) < total
    elif limit is not None:
        has_more = len(items) == limit

    return PaginatedResponse(
        items=items,
        total=total,
        offset=offset,
        limit=limit,
        has_more=has_more
    )
