"""Base classes for context profiles.

The wire format uses camelCase keys (``basePrompt``, ``maintainedBy``); the
models accept either spelling and dump camelCase when asked ``by_alias``.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ProfileEntry(BaseModel):
    """A profile as written in an import file.

    The identifier is optional; entries without one are always created.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str | None = Field(default=None, description="Backend-assigned identifier")
    role: str = Field(..., description="Role label")
    base_prompt: str = Field(
        default="",
        alias="basePrompt",
        description="Base prompt text for the role",
    )
    maintained_by: str = Field(
        default="",
        alias="maintainedBy",
        description="Who maintains this profile",
    )

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        # Some backends and YAML files use numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    def to_wire(self) -> dict[str, Any]:
        """Dump the record in the backend's camelCase form."""
        return self.model_dump(by_alias=True)

    def to_draft(self) -> "ContextDraft":
        return ContextDraft.from_profile(self)


class ContextProfile(ProfileEntry):
    """A context profile as stored by the backend."""

    id: str = Field(..., description="Backend-assigned identifier")


class ContextDraft(BaseModel):
    """Edit-form state for creating or updating a profile.

    Holds only the fields a user edits; the identifier and maintainer are
    supplied by the backend and the page respectively.
    """

    model_config = ConfigDict(populate_by_name=True)

    role: str = Field(default="", description="Role label")
    base_prompt: str = Field(
        default="",
        alias="basePrompt",
        description="Base prompt text",
    )

    @classmethod
    def from_profile(cls, profile: ProfileEntry) -> "ContextDraft":
        return cls(role=profile.role, base_prompt=profile.base_prompt)

    def is_blank(self) -> bool:
        return not self.role and not self.base_prompt

    def to_payload(self, maintained_by: str | None = None) -> dict[str, Any]:
        """Build a request body.

        Updates send only the editable fields. Creates also carry the
        maintainer.
        """
        payload: dict[str, Any] = {
            "role": self.role,
            "basePrompt": self.base_prompt,
        }
        if maintained_by is not None:
            payload["maintainedBy"] = maintained_by
        return payload
