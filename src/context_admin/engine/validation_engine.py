"""Validation Engine - Enforces form and import correctness.

The Validation Engine ensures:
- Edit forms carry a role and a base prompt
- Imported profile lists have unique identifiers
"""

from typing import Any
from enum import Enum
from dataclasses import dataclass, field

from context_admin.profiles.base import ContextDraft, ProfileEntry


MAX_ROLE_LENGTH = 100


class ValidationSeverity(str, Enum):
    """Severity levels for validation issues."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationIssue:
    """A single validation issue."""

    severity: ValidationSeverity
    message: str
    path: str = ""
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "severity": self.severity.value,
            "message": self.message,
            "path": self.path,
            "context": self.context,
        }


@dataclass
class ValidationResult:
    """Result of a validation operation."""

    valid: bool
    issues: list[ValidationIssue] = field(default_factory=list)
    validated_count: int = 0

    @property
    def error_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == ValidationSeverity.WARNING)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    def add_issue(
        self,
        severity: ValidationSeverity,
        message: str,
        path: str = "",
        **context: Any,
    ) -> None:
        self.issues.append(
            ValidationIssue(
                severity=severity,
                message=message,
                path=path,
                context=context,
            )
        )
        if severity == ValidationSeverity.ERROR:
            self.valid = False

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another validation result into this one."""
        return ValidationResult(
            valid=self.valid and other.valid,
            issues=self.issues + other.issues,
            validated_count=self.validated_count + other.validated_count,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "error_count": self.error_count,
            "warning_count": self.warning_count,
            "validated_count": self.validated_count,
            "issues": [i.to_dict() for i in self.issues],
        }


class ValidationEngine:
    """Engine for validating edit forms and imported profile lists."""

    def validate_draft(self, draft: ContextDraft, path: str = "") -> ValidationResult:
        """Validate an edit form before it is saved.

        Checks:
        - Role is present
        - Base prompt is present
        - Role is short and has no surrounding whitespace
        """
        result = ValidationResult(valid=True, validated_count=1)
        prefix = f"{path}." if path else ""

        if not draft.role.strip():
            result.add_issue(
                ValidationSeverity.ERROR,
                "Role is required",
                path=f"{prefix}role",
            )
        else:
            if draft.role != draft.role.strip():
                result.add_issue(
                    ValidationSeverity.WARNING,
                    "Role has leading or trailing whitespace",
                    path=f"{prefix}role",
                    actual=draft.role,
                )
            if len(draft.role) > MAX_ROLE_LENGTH:
                result.add_issue(
                    ValidationSeverity.WARNING,
                    f"Role is longer than {MAX_ROLE_LENGTH} characters",
                    path=f"{prefix}role",
                    length=len(draft.role),
                )

        if not draft.base_prompt.strip():
            result.add_issue(
                ValidationSeverity.ERROR,
                "Base prompt is required",
                path=f"{prefix}base_prompt",
            )

        return result

    def validate_profiles(
        self,
        profiles: list[ProfileEntry],
        check_ids: bool = True,
    ) -> ValidationResult:
        """Validate a list of profiles, e.g. before a bulk import.

        Checks:
        - Every profile passes draft validation
        - No duplicate identifiers, when check_ids is set
        - No duplicate roles (warning only)
        """
        result = ValidationResult(valid=True)

        seen_ids: set[str] = set()
        seen_roles: set[str] = set()

        for i, profile in enumerate(profiles):
            path = f"profiles[{i}]"
            result = result.merge(
                self.validate_draft(ContextDraft.from_profile(profile), path=path)
            )

            if check_ids and profile.id is not None:
                if profile.id in seen_ids:
                    result.add_issue(
                        ValidationSeverity.ERROR,
                        f"Duplicate profile id: {profile.id}",
                        path=f"{path}.id",
                    )
                seen_ids.add(profile.id)

            role_key = profile.role.strip().lower()
            if role_key and role_key in seen_roles:
                result.add_issue(
                    ValidationSeverity.WARNING,
                    f"Duplicate role: {profile.role}",
                    path=f"{path}.role",
                )
            seen_roles.add(role_key)

        if not profiles:
            result.add_issue(
                ValidationSeverity.INFO,
                "No profiles to validate",
            )

        return result
