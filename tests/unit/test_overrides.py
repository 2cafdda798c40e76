"""Tests for the manual override (exemption) set."""

import json
from pathlib import Path

from catalog_sync.catalog import ManualOverrideSet, OverrideEntry
from catalog_sync.config import MappingConfig


class TestManualOverrideSet:
    """Tests for ManualOverrideSet."""

    def test_membership_is_case_insensitive(self) -> None:
        """Test exemption lookups ignore case."""
        overrides = ManualOverrideSet([OverrideEntry(target_title="Call of Duty: Black Ops 6")])

        assert overrides.is_exempt("Call of Duty: Black Ops 6") is True
        assert overrides.is_exempt("CALL OF DUTY: BLACK OPS 6") is True
        assert overrides.is_exempt("Call of Duty: Black Ops 5") is False

    def test_membership_is_exact(self) -> None:
        """Test that exemptions do not match on normalized or partial titles."""
        overrides = ManualOverrideSet([OverrideEntry(target_title="Call of Duty: Black Ops 6")])

        assert overrides.is_exempt("Call of Duty Black Ops 6") is False
        assert overrides.is_exempt("Call of Duty") is False

    def test_entries_and_len(self) -> None:
        """Test accessors for the loaded list."""
        overrides = ManualOverrideSet(
            [OverrideEntry(target_title="A Game", reason="missing from store"), OverrideEntry(target_title="B")]
        )

        assert len(overrides) == 2
        assert overrides.entries[0].reason == "missing from store"

    def test_missing_file_falls_back_to_empty(self, tmp_path: Path) -> None:
        """Test that a missing file yields no exemptions."""
        overrides = ManualOverrideSet.from_file(tmp_path / "missing.json")

        assert len(overrides) == 0
        assert overrides.is_exempt("Anything") is False

    def test_wrong_shape_falls_back_to_empty(self, tmp_path: Path) -> None:
        """Test that a malformed file yields no exemptions."""
        path = tmp_path / "additions.json"
        path.write_text(json.dumps({"additions": "not a list"}), encoding="utf-8")

        assert len(ManualOverrideSet.from_file(path)) == 0

    def test_valid_file(self, tmp_path: Path) -> None:
        """Test loading a well-formed exemption list."""
        path = tmp_path / "additions.json"
        path.write_text(
            json.dumps({"version": "1.3", "additions": [{"target_title": "Gran Turismo 7"}]}),
            encoding="utf-8",
        )

        overrides = ManualOverrideSet.from_file(path)

        assert overrides.version == "1.3"
        assert overrides.is_exempt("gran turismo 7") is True

    def test_bundled_list_loads(self) -> None:
        """Test that the exemption list shipped with the package is valid."""
        overrides = ManualOverrideSet.from_file(MappingConfig().exemption_list_path)

        assert overrides.is_exempt("Call of Duty: Black Ops 6") is True
