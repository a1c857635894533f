"""Tests for message catalog lookup."""

import json

import pytest

from app.core.i18n import Translator, load_messages


class TestTranslator:
    def test_builtin_english_defaults(self) -> None:
        t = Translator()
        assert t.translate("security_report.title") == "Users, Groups and Permissions"
        assert t.translate("security_report.never") == "Never"
        assert t.translate("security_report.no_groups") == "Not in a Security Group"
        assert t.translate("security_report.no_permissions") == "No Permissions"

    def test_catalog_entry_wins(self) -> None:
        t = Translator("de", {"security_report.never": "Nie"})
        assert t.translate("security_report.never") == "Nie"
        assert t.translate("security_report.no_groups") == "Not in a Security Group"

    def test_unknown_key_uses_default_then_key(self) -> None:
        t = Translator()
        assert t.translate("other.key", "Fallback") == "Fallback"
        assert t.translate("other.key") == "other.key"

    def test_params_are_formatted(self) -> None:
        t = Translator("en", {"greeting": "Hello {name}"})
        assert t.translate("greeting", name="Ada") == "Hello Ada"


class TestLoadMessages:
    def test_no_directory(self) -> None:
        assert load_messages(None, "en") == {}

    def test_missing_file(self, tmp_path) -> None:
        assert load_messages(str(tmp_path), "fr") == {}

    def test_reads_locale_file(self, tmp_path) -> None:
        (tmp_path / "nl.json").write_text(json.dumps({"security_report.never": "Nooit"}), encoding="utf-8")
        assert load_messages(str(tmp_path), "nl") == {"security_report.never": "Nooit"}

    def test_invalid_json(self, tmp_path) -> None:
        (tmp_path / "nl.json").write_text("{not json", encoding="utf-8")
        with pytest.raises(ValueError, match="Invalid message catalog"):
            load_messages(str(tmp_path), "nl")

    def test_non_string_values(self, tmp_path) -> None:
        (tmp_path / "nl.json").write_text(json.dumps({"a": 1}), encoding="utf-8")
        with pytest.raises(ValueError, match="must map identifiers to strings"):
            load_messages(str(tmp_path), "nl")
