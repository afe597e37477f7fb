"""Utility functions for Context Admin."""

from context_admin.utils.helpers import (
    join_url,
    quote_segment,
    truncate,
    first_line,
)

__all__ = [
    "join_url",
    "quote_segment",
    "truncate",
    "first_line",
]
