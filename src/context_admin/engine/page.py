"""Contexts Page - state controller for the context profile admin page.

The page holds the last fetched list, a loading flag, an error message and
the editor state (create mode, the id being edited, the form). Every
mutation is followed by a fresh fetch; nothing else is cached.
"""

import logging
import threading
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Iterator

from context_admin.client.api import ApiError, ContextProfileClient
from context_admin.config import DEFAULT_MAINTAINER
from context_admin.profiles.base import ContextProfile, ContextDraft

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


class ViewState(str, Enum):
    """What the page currently shows."""

    LOADING = "loading"
    ERROR = "error"
    READY = "ready"


class RequestInFlightError(RuntimeError):
    """A request was started while another one was still running."""


class ContextsPage:
    """Controller for listing, creating, editing and deleting profiles.

    Args:
        client: Client for the profile backend
        maintainer: Recorded as ``maintainedBy`` on profiles created here
        confirm: Asked before a delete; receives the question, returns
            whether to proceed
    """

    def __init__(
        self,
        client: ContextProfileClient,
        maintainer: str = DEFAULT_MAINTAINER,
        confirm: ConfirmCallback | None = None,
    ):
        self.client = client
        self.maintainer = maintainer
        self.confirm = confirm

        self.contexts: list[ContextProfile] = []
        self.loading = True
        self.error: str | None = None
        self.is_creating = False
        self.editing_id: str | None = None
        self.form_data = ContextDraft()

        self._request_lock = threading.Lock()

    # Derived state

    @property
    def editor_open(self) -> bool:
        return self.is_creating or self.editing_id is not None

    @property
    def show_add_button(self) -> bool:
        return not self.editor_open

    @property
    def editing_context(self) -> ContextProfile | None:
        """The record being edited, or None in create mode."""
        if self.editing_id is None:
            return None
        return self.find(self.editing_id)

    @property
    def is_empty(self) -> bool:
        return not self.contexts

    @property
    def view_state(self) -> ViewState:
        if self.loading:
            return ViewState.LOADING
        if self.error is not None:
            return ViewState.ERROR
        return ViewState.READY

    def find(self, profile_id: str) -> ContextProfile | None:
        for context in self.contexts:
            if context.id == profile_id:
                return context
        return None

    # Loading

    def mount(self) -> None:
        """Initial load, as when the page is first shown."""
        self.fetch_contexts()

    def fetch_contexts(self) -> bool:
        """Replace the list with the backend's current one.

        Returns:
            True if the fetch succeeded
        """
        with self._in_flight():
            return self._load()

    def reload(self) -> bool:
        """Clear any error and fetch again."""
        with self._in_flight():
            self.error = None
            self.loading = True
            return self._load()

    # Editor

    def start_create(self) -> bool:
        """Open the editor for a new profile.

        Returns:
            False if the editor was already open
        """
        if self.editor_open:
            return False
        self.is_creating = True
        self.form_data = ContextDraft()
        return True

    def handle_edit(self, context: ContextProfile) -> None:
        self.is_creating = False
        self.editing_id = context.id
        self.form_data = ContextDraft.from_profile(context)

    def handle_cancel(self) -> None:
        self._reset_editor()

    def handle_save(self, draft: ContextDraft) -> bool:
        """Create or update from the editor's form, then refresh the list.

        Returns:
            True if the save succeeded
        """
        if not self.editor_open:
            raise RuntimeError("No profile is being created or edited")

        with self._in_flight():
            self.form_data = draft
            try:
                if self.is_creating:
                    self.client.create_profile(draft, maintained_by=self.maintainer)
                    logger.info("Created context profile for role %r", draft.role)
                else:
                    self.client.update_profile(self.editing_id, draft)
                    logger.info("Updated context profile %s", self.editing_id)
            except ApiError as e:
                self.error = str(e) or "Failed to save"
                return False

            self._load()

        self._reset_editor()
        return True

    def handle_delete(
        self,
        context: ContextProfile,
        confirm: ConfirmCallback | None = None,
    ) -> bool:
        """Delete a profile once the user confirms, then refresh the list.

        Returns:
            True if the profile was deleted
        """
        confirm = confirm or self.confirm
        if confirm is None:
            raise ValueError("A confirm callback is required to delete a profile")

        if not confirm(f'Delete context "{context.role}"?'):
            return False

        with self._in_flight():
            try:
                self.client.delete_profile(context.id)
                logger.info("Deleted context profile %s", context.id)
            except ApiError as e:
                self.error = str(e) or "Failed to delete"
                return False

            self._load()

        return True

    # Internals

    def _load(self) -> bool:
        try:
            self.contexts = self.client.list_profiles()
            return True
        except ApiError as e:
            self.error = str(e) or "An error occurred"
            return False
        finally:
            self.loading = False

    def _reset_editor(self) -> None:
        self.is_creating = False
        self.editing_id = None
        self.form_data = ContextDraft()

    @contextmanager
    def _in_flight(self) -> Iterator[None]:
        if not self._request_lock.acquire(blocking=False):
            raise RequestInFlightError("Another request is already in progress")
        try:
            yield
        finally:
            self._request_lock.release()
