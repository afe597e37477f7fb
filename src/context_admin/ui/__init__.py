"""UI module - terminal rendering of the contexts page and its editor."""

from context_admin.ui.view import PageView, profiles_table
from context_admin.ui.editor import ContextEditor

__all__ = [
    "PageView",
    "profiles_table",
    "ContextEditor",
]
