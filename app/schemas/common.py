"""Response envelope shared by every endpoint"""

from datetime import datetime
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorBody(BaseModel):
    message: str
    code: str
    details: Optional[Any] = None


class ApiResponse(BaseModel, Generic[T]):
    """{success, data?, error?, timestamp}"""
    success: bool = True
    data: Optional[T] = None
    error: Optional[ErrorBody] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class Page(BaseModel, Generic[T]):
    """Paginated list"""
    items: List[T]
    total: int
    page: int
    page_size: int


def ok(data: Any = None) -> dict:
    """Success envelope; data is validated by the route's response_model"""
    return {"success": True, "data": data, "timestamp": datetime.utcnow()}


def error_body(code: str, message: str, details: Any = None) -> dict:
    error = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return {"success": False, "error": error, "timestamp": datetime.utcnow().isoformat()}
