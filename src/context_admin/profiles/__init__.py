"""Profiles module - the context profile records and their edit form.

A context profile binds a role to the base prompt it starts from, and names
who maintains it. Identifiers are owned by the backend.
"""

from context_admin.profiles.base import ContextProfile, ContextDraft, ProfileEntry
from context_admin.profiles.loader import ProfileLoader, load_profiles, save_profiles

__all__ = [
    "ContextProfile",
    "ProfileEntry",
    "ContextDraft",
    "ProfileLoader",
    "load_profiles",
    "save_profiles",
]
