"""Context Admin - Manage role context profiles through a REST backend.

Lists, creates, edits and deletes context profiles (a role, its base prompt
and a maintainer) from the terminal, either with one-shot commands or an
interactive page.
"""

__version__ = "0.1.0"

from context_admin.profiles.base import ContextProfile, ContextDraft
from context_admin.client.api import ContextProfileClient, ApiError
from context_admin.engine.page import ContextsPage
from context_admin.engine.validation_engine import ValidationEngine

__all__ = [
    "ContextProfile",
    "ContextDraft",
    "ContextProfileClient",
    "ApiError",
    "ContextsPage",
    "ValidationEngine",
]
