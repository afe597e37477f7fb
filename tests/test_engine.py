"""Tests for the Validation Engine."""

import pytest

from context_admin.engine.validation_engine import (
    ValidationEngine,
    ValidationResult,
    ValidationSeverity,
    MAX_ROLE_LENGTH,
)
from context_admin.profiles.base import ContextProfile, ContextDraft, ProfileEntry


@pytest.fixture
def engine():
    return ValidationEngine()


class TestValidateDraft:
    """Tests for validating edit forms."""

    def test_valid_draft(self, engine):
        result = engine.validate_draft(ContextDraft(role="QA", base_prompt="Test it."))

        assert result.valid
        assert result.issues == []
        assert result.validated_count == 1

    def test_empty_draft(self, engine):
        result = engine.validate_draft(ContextDraft())

        assert not result.valid
        assert result.error_count == 2
        assert {i.path for i in result.errors} == {"role", "base_prompt"}

    def test_blank_role(self, engine):
        result = engine.validate_draft(ContextDraft(role="   ", base_prompt="x"))

        assert not result.valid
        assert result.errors[0].message == "Role is required"

    def test_role_whitespace_warning(self, engine):
        result = engine.validate_draft(ContextDraft(role=" QA ", base_prompt="x"))

        assert result.valid
        assert result.warning_count == 1

    def test_long_role_warning(self, engine):
        result = engine.validate_draft(
            ContextDraft(role="r" * (MAX_ROLE_LENGTH + 1), base_prompt="x")
        )

        assert result.valid
        assert result.issues[0].severity == ValidationSeverity.WARNING
        assert result.issues[0].context["length"] == MAX_ROLE_LENGTH + 1

    def test_path_prefix(self, engine):
        result = engine.validate_draft(ContextDraft(role="x"), path="profiles[3]")

        assert result.errors[0].path == "profiles[3].base_prompt"


class TestValidateProfiles:
    """Tests for validating profile lists."""

    def test_valid_profiles(self, engine):
        profiles = [
            ContextProfile(id="1", role="PM", base_prompt="Scope."),
            ContextProfile(id="2", role="QA", base_prompt="Tests."),
        ]

        result = engine.validate_profiles(profiles)

        assert result.valid
        assert result.validated_count == 2

    def test_duplicate_ids(self, engine):
        profiles = [
            ContextProfile(id="1", role="PM", base_prompt="Scope."),
            ContextProfile(id="1", role="QA", base_prompt="Tests."),
        ]

        result = engine.validate_profiles(profiles)

        assert not result.valid
        assert result.errors[0].path == "profiles[1].id"

    def test_duplicate_ids_unchecked(self, engine):
        profiles = [
            ContextProfile(id="1", role="PM", base_prompt="Scope."),
            ContextProfile(id="1", role="QA", base_prompt="Tests."),
        ]

        assert engine.validate_profiles(profiles, check_ids=False).valid

    def test_missing_ids_are_not_duplicates(self, engine):
        profiles = [
            ProfileEntry(role="PM", base_prompt="Scope."),
            ProfileEntry(role="QA", base_prompt="Tests."),
        ]

        result = engine.validate_profiles(profiles)

        assert result.valid
        assert result.validated_count == 2

    def test_duplicate_roles_warn(self, engine):
        profiles = [
            ContextProfile(id="1", role="QA", base_prompt="a"),
            ContextProfile(id="2", role="qa", base_prompt="b"),
        ]

        result = engine.validate_profiles(profiles)

        assert result.valid
        assert result.warning_count == 1

    def test_invalid_entry(self, engine):
        result = engine.validate_profiles([ContextProfile(id="1", role="PM")])

        assert not result.valid
        assert result.errors[0].path == "profiles[0].base_prompt"

    def test_empty_list(self, engine):
        result = engine.validate_profiles([])

        assert result.valid
        assert result.issues[0].severity == ValidationSeverity.INFO


class TestValidationResult:
    """Tests for ValidationResult."""

    def test_merge(self):
        a = ValidationResult(valid=True, validated_count=1)
        b = ValidationResult(valid=True, validated_count=2)
        b.add_issue(ValidationSeverity.ERROR, "broken")

        merged = a.merge(b)

        assert not merged.valid
        assert merged.validated_count == 3
        assert merged.error_count == 1

    def test_to_dict(self):
        result = ValidationResult(valid=True)
        result.add_issue(ValidationSeverity.WARNING, "careful", path="role", actual=" x")

        data = result.to_dict()

        assert data["valid"]
        assert data["warning_count"] == 1
        assert data["issues"][0] == {
            "severity": "warning",
            "message": "careful",
            "path": "role",
            "context": {"actual": " x"},
        }
