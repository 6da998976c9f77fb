"""Response envelopes shared by every v1 route."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error_code": "POST_NOT_FOUND",
                "message": "Post not found",
                "details": {"post_id": "9b2f4c1e-3d8a-4f6b-a1c2-5e7d9f0b3a41"},
            }
        }
    )

    error_code: str
    message: str
    details: Any | None = None


class MessageResponse(BaseModel):
    """Confirmation for deletes and like toggles, which return no resource."""

    message: str
