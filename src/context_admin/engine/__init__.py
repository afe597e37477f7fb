"""Engine module - page state and validation.

Contains:
- Contexts Page: holds the list and editor state, drives the client
- Validation Engine: checks edit forms and imported profiles
"""

from context_admin.engine.page import ContextsPage, RequestInFlightError, ViewState
from context_admin.engine.validation_engine import ValidationEngine, ValidationResult

__all__ = [
    "ContextsPage",
    "RequestInFlightError",
    "ViewState",
    "ValidationEngine",
    "ValidationResult",
]
