"""Profile Loader for exporting and importing profiles as YAML files."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from context_admin.profiles.base import ContextProfile, ProfileEntry


class ProfileLoader:
    """Loads and saves lists of context profiles as YAML documents.

    Documents hold a ``profiles`` list. Keys may be camelCase as on the wire
    or snake_case. Entries may omit the identifier.
    """

    def load_file(self, path: Path | str) -> list[ProfileEntry]:
        """Load profiles from a YAML file.

        Args:
            path: Path to the YAML file

        Returns:
            Loaded profiles in file order
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Profile file not found: {path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        return self._parse_profiles(data)

    def load_from_string(self, content: str) -> list[ProfileEntry]:
        """Load profiles from a YAML string."""
        data = yaml.safe_load(content)
        return self._parse_profiles(data)

    def _parse_profiles(self, data: Any) -> list[ProfileEntry]:
        if data is None:
            return []

        # A bare list is accepted as well as the {"profiles": [...]} form
        if isinstance(data, dict):
            items = data.get("profiles", [])
        else:
            items = data

        if not isinstance(items, list):
            raise ValueError("'profiles' must be a list")

        profiles = []
        for i, item in enumerate(items):
            if not isinstance(item, dict):
                raise ValueError(f"profiles[{i}]: entry must be a mapping")
            try:
                profiles.append(ProfileEntry.model_validate(item))
            except ValidationError as e:
                raise ValueError(f"profiles[{i}]: {e}") from e

        return profiles

    def save_file(self, profiles: list[ContextProfile], path: Path | str) -> None:
        """Save profiles to a YAML file.

        Args:
            profiles: The profiles to save
            path: Path for the output file
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w", encoding="utf-8") as f:
            f.write(self.dump_string(profiles))

    def dump_string(self, profiles: list[ContextProfile]) -> str:
        data = {"profiles": [p.to_wire() for p in profiles]}
        return yaml.dump(
            data,
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )


def load_profiles(path: Path | str) -> list[ProfileEntry]:
    """Convenience function to load profiles from a file."""
    return ProfileLoader().load_file(path)


def save_profiles(profiles: list[ContextProfile], path: Path | str) -> None:
    """Convenience function to save profiles to a file."""
    ProfileLoader().save_file(profiles, path)
