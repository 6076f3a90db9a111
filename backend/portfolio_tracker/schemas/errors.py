# backend/portfolio_tracker/schemas/errors.py
"""
Error envelope returned by every failing endpoint.

main.py converts domain exceptions, HTTPException and request validation
failures into one of these two shapes.
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """
    Standard error body: {error, message, details}.
    """

    error: str = Field(
        ...,
        description="Error type (e.g., 'PortfolioNotFoundError')"
    )
    message: str = Field(
        ...,
        description="Human-readable error message"
    )
    details: dict | None = Field(
        default=None,
        description="Structured context such as the offending id (optional)"
    )


class ValidationErrorDetail(BaseModel):
    """Body of a 422 response; one entry per invalid field."""

    error: str = Field(default="ValidationError")
    message: str = Field(default="Request validation failed")
    details: list[dict] = Field(
        ...,
        description="Invalid fields with message and error type"
    )
