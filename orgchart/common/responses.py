"""Uniform response envelope returned by every service operation."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class AppResponse(BaseModel, Generic[T]):
    """``{status_code, success, data}`` wrapper around any payload."""

    status_code: int
    success: bool = True
    data: Optional[T] = None
