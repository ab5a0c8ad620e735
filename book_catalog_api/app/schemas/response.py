"""
Uniform response envelope.

Every endpoint answers with ``{"success", "message", "data", "error"}``.
Successful calls set ``data`` (and usually a short ``message``); domain
failures set ``error``; boundary validation failures set ``message``.
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    message: Optional[str] = None
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: Optional[T] = None, message: Optional[str] = "Success") -> "ApiResponse[T]":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str) -> "ApiResponse[T]":
        return cls(success=False, error=error)

    @classmethod
    def invalid(cls, message: str) -> "ApiResponse[T]":
        """Envelope for input rejected before it reached the service."""
        return cls(success=False, message=message)

    def to_json(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
