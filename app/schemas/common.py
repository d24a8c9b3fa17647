"""Response envelopes shared by every endpoint."""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class ApiResponse(BaseModel, Generic[DataT]):
    """Success envelope: {success: true, data, message}."""

    success: bool = True
    data: DataT | None = None
    message: str = "OK"


class ErrorResponse(BaseModel):
    """Error envelope returned by the exception handlers."""

    success: bool = False
    message: str
    error: str
    details: dict[str, Any] | None = None


class Page(BaseModel, Generic[DataT]):
    """One page of a list plus paging metadata (page is 1-based)."""

    items: list[DataT]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1)


def ok(data: Any = None, message: str = "OK") -> dict[str, Any]:
    """Build a success envelope; response_model validates data."""
    return {"success": True, "data": data, "message": message}
