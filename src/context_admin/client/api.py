"""REST client for the context profile endpoints.

The backend exposes four operations under ``/api/context-profiles``: list,
create, update and delete. Every non-2xx response is a failure and is raised
as an :class:`ApiError` carrying a short, user-facing message.
"""

import logging
from typing import Any

import requests
from pydantic import ValidationError

from context_admin.profiles.base import ContextProfile, ContextDraft
from context_admin.utils.helpers import join_url, quote_segment

logger = logging.getLogger(__name__)

PROFILES_PATH = "/api/context-profiles"

FETCH_FAILED = "Failed to fetch contexts"
SAVE_FAILED = "Failed to save context"
DELETE_FAILED = "Failed to delete context"


class ApiError(Exception):
    """A request to the profile backend failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ProfileNotFoundError(ApiError):
    """No profile with the requested identifier exists."""


class ContextProfileClient:
    """Client for the context profile REST backend.

    Args:
        base_url: Scheme and host of the backend, e.g. ``http://localhost:3000``
        timeout: Per-request timeout in seconds
        session: Optional pre-configured ``requests.Session``
        token: Optional bearer token sent with every request
        verify_ssl: Whether to verify TLS certificates
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
        token: str | None = None,
        verify_ssl: bool = True,
    ):
        self.base_url = base_url
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.verify = verify_ssl
        elif not verify_ssl:
            session.verify = False
        self.session = session
        self.session.headers.setdefault("Accept", "application/json")
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"

    @property
    def collection_url(self) -> str:
        return join_url(self.base_url, PROFILES_PATH)

    def item_url(self, profile_id: str) -> str:
        """URL of a single profile.

        Raises:
            ValueError: If the id is empty or a dot segment, which would
                address the collection or its parent instead
        """
        if profile_id in ("", ".", ".."):
            raise ValueError(f"Invalid context profile id: {profile_id!r}")
        return f"{self.collection_url}/{quote_segment(profile_id)}"

    def list_profiles(self) -> list[ContextProfile]:
        """Fetch every context profile."""
        response = self._request("GET", self.collection_url, failure=FETCH_FAILED)

        try:
            data = response.json()
        except ValueError as e:
            raise ApiError(f"{FETCH_FAILED}: invalid JSON response") from e

        if not isinstance(data, list):
            raise ApiError(f"{FETCH_FAILED}: expected a list of profiles")

        try:
            return [ContextProfile.model_validate(item) for item in data]
        except ValidationError as e:
            raise ApiError(f"{FETCH_FAILED}: malformed profile in response") from e

    def get_profile(self, profile_id: str) -> ContextProfile:
        """Find a single profile.

        The backend has no single-item read, so this filters the list.

        Raises:
            ProfileNotFoundError: If no profile has the identifier
        """
        for profile in self.list_profiles():
            if profile.id == profile_id:
                return profile
        raise ProfileNotFoundError(f"Context profile '{profile_id}' not found", 404)

    def create_profile(
        self,
        draft: ContextDraft,
        maintained_by: str,
    ) -> ContextProfile | None:
        """Create a profile.

        Args:
            draft: Role and base prompt for the new profile
            maintained_by: Maintainer label recorded on the profile

        Returns:
            The created profile if the backend echoes it, otherwise None
        """
        response = self._request(
            "POST",
            self.collection_url,
            failure=SAVE_FAILED,
            json=draft.to_payload(maintained_by=maintained_by),
        )
        return self._parse_echo(response)

    def update_profile(
        self,
        profile_id: str,
        draft: ContextDraft,
    ) -> ContextProfile | None:
        """Replace a profile's role and base prompt."""
        response = self._request(
            "PUT",
            self.item_url(profile_id),
            failure=SAVE_FAILED,
            json=draft.to_payload(),
        )
        return self._parse_echo(response)

    def delete_profile(self, profile_id: str) -> None:
        """Delete a profile."""
        self._request("DELETE", self.item_url(profile_id), failure=DELETE_FAILED)

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "ContextProfileClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _request(
        self,
        method: str,
        url: str,
        failure: str,
        json: dict[str, Any] | None = None,
    ) -> requests.Response:
        """Send a request and raise ApiError unless it succeeded."""
        logger.debug("%s %s", method, url)

        headers = {"Content-Type": "application/json"} if json is not None else None
        try:
            response = self.session.request(
                method,
                url,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(str(e) or failure) from e

        if not response.ok:
            logger.warning("%s %s returned HTTP %s", method, url, response.status_code)
            raise ApiError(failure, status_code=response.status_code)

        return response

    def _parse_echo(self, response: requests.Response) -> ContextProfile | None:
        """Parse the record a mutation returned, if it returned one."""
        if not response.content:
            return None
        try:
            return ContextProfile.model_validate(response.json())
        except (ValueError, ValidationError):
            logger.debug("Ignoring non-profile response body from %s", response.url)
            return None
