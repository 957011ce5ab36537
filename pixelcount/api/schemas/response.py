"""API Schemas - Response Models"""
from pydantic import BaseModel, Field
from typing import Optional, Union


class PixelsResponse(BaseModel):
    """Last count posted to the display"""
    pixels: Optional[Union[int, float]] = Field(
        default=None, description="Last posted total, null before the first count"
    )
    state: str = Field(..., description="Aggregator state of the latest run")
    closed: bool = Field(default=False, description="Whether the session was closed")


class RefreshResponse(BaseModel):
    """Result of a refresh or close message"""
    type: str
    pixels: Optional[Union[int, float]] = None


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    detail: Optional[str] = None
    request_id: Optional[str] = None
