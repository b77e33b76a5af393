"""Common Pydantic schemas."""

from typing import Any, Dict

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: Dict[str, Any] = Field(
        ...,
        examples=[
            {
                "code": "NOT_FOUND",
                "message": "Study plan not found",
                "details": {},
            }
        ],
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
