"""
API Module - Black Box Interface

Purpose: HTTP request and response shapes
Interface: Pydantic models used by the REST routes
Hidden: Field aliasing between wire names and Python names

The API module only describes data - it contains no business logic.
All logic is delegated to the assets and gateway modules.
"""

from .models import (
    AssetChangeResponse,
    AssetCreateRequest,
    AssetUpdateRequest,
    ErrorResponse,
    HealthResponse,
)

__all__ = [
    "AssetChangeResponse",
    "AssetCreateRequest",
    "AssetUpdateRequest",
    "ErrorResponse",
    "HealthResponse",
]
