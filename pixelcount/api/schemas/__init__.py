"""API Schemas"""
from .response import PixelsResponse, RefreshResponse, ErrorResponse

__all__ = ["PixelsResponse", "RefreshResponse", "ErrorResponse"]
