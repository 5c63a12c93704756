"""Tests for settings loading and preview messages."""

from __future__ import annotations

import logging

import pytest

from reftagger.config import Settings, message


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.language == "en"
        assert settings.on_page_load is True
        assert settings.iframes is True
        assert settings.exclude == []
        assert settings.versions[:2] == ["quran", "injil"]
        assert settings.excerpt_length == 400

    def test_update_accepts_camel_case_aliases(self):
        settings = Settings()
        ignored = settings.update({"onPageLoad": False, "excerptLength": 120, "theme": "dark"})

        assert ignored == []
        assert settings.on_page_load is False
        assert settings.excerpt_length == 120
        assert settings.theme == "dark"

    def test_unknown_options_are_ignored_with_warning(self, caplog):
        settings = Settings()
        with caplog.at_level(logging.WARNING, logger="reftagger.config"):
            ignored = settings.update({"colour": "red", "language": "ar"})

        assert ignored == ["colour"]
        assert settings.language == "ar"
        assert "colour" in caplog.text


class TestFromFile:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "language: ar\nversions: [tma, quran]\nexclude: ['.no-tag']\n",
            encoding="utf-8",
        )

        settings = Settings.from_file(path)
        assert settings.language == "ar"
        assert settings.versions == ["tma", "quran"]
        assert settings.exclude == [".no-tag"]

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("", encoding="utf-8")
        assert Settings.from_file(path) == Settings()

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Settings.from_file(tmp_path / "nope.yaml")

    def test_missing_default_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr("reftagger.config.DEFAULT_CONFIG_PATH", tmp_path / "none.yaml")
        assert Settings.from_file() == Settings()

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ValueError):
            Settings.from_file(path)


class TestMessages:
    def test_english(self):
        assert message("en", "not_found") == "Verse not found"

    def test_arabic(self):
        assert message("ar", "not_found") == "لم يتم العثور على الآية"

    def test_unknown_language_falls_back(self):
        assert message("fr", "fetch_failed") == "Unable to load verses"
