"""Pydantic schema for API error responses."""

from pydantic import BaseModel, Field


class ErrorResponseSchema(BaseModel):
    """Standard error response format for all API errors."""
    error: str = Field(
        ...,
        description="Error code",
        examples=["INVALID_SCORE_REQUEST"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["debt ids must be unique"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "error": "INVALID_SCORE_REQUEST",
                    "message": "debt ids must be unique",
                    "request_id": "abc123",
                }
            ]
        }
    }
