"""
Error response models.

Mirrors ``HRDCError.to_dict()`` so clients see one error shape.
"""

from typing import Any

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)
