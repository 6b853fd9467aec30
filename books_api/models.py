"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class BookInput(BaseModel):
    """Request body for creating or replacing a book."""
    title: Optional[str] = Field(None, description="Book name")
    author: Optional[str] = Field(None, description="Book author")
    description: Optional[str] = Field(None, description="Book description")
    year: Optional[int] = Field(None, description="Year of release")

    model_config = {
        "json_schema_extra": {
            "example": {"title": "Dune", "author": "Herbert", "year": 1965}
        }
    }

    def as_params(self) -> tuple:
        """Positional statement parameters in column order."""
        return (self.title, self.author, self.description, self.year)


class Book(BaseModel):
    """Book response model for API."""
    id: int = Field(..., description="Unique book ID")
    title: Optional[str] = Field(None, description="Book name")
    author: Optional[str] = Field(None, description="Book author")
    description: Optional[str] = Field(None, description="Book description")
    year: int = Field(..., description="Year of release")

    @classmethod
    def from_row(cls, row: Any) -> "Book":
        """Build a book from a database row mapping."""
        return cls(**dict(row))


class BookCreatedResponse(BaseModel):
    """Response for a newly created book."""
    id: int = Field(..., description="Generated book ID")


class MessageResponse(BaseModel):
    """Confirmation message response."""
    message: str = Field(..., description="Outcome of the operation")


class ErrorResponse(BaseModel):
    """Error response model."""
    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Additional error details")

    def body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    database_status: str = Field(..., description="Database connection status")
