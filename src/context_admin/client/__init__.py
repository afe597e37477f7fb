"""Client module - access to the context profile REST endpoints."""

from context_admin.client.api import (
    ApiError,
    ContextProfileClient,
    ProfileNotFoundError,
    PROFILES_PATH,
)

__all__ = [
    "ApiError",
    "ContextProfileClient",
    "ProfileNotFoundError",
    "PROFILES_PATH",
]
