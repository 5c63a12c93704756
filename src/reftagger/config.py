"""Configuration settings for reftagger."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".reftagger" / "config.yaml"

# Original option names accepted alongside the snake_case fields
OPTION_ALIASES = {
    "onPageLoad": "on_page_load",
    "excerptLength": "excerpt_length",
    "siteUrl": "site_url",
    "fetchTimeout": "fetch_timeout",
}


@dataclass
class Settings:
    """Tagger settings."""

    # UI locale for preview messages
    language: str = "en"

    # Tag a document as soon as it is loaded
    on_page_load: bool = True

    # Recurse into <iframe srcdoc> documents
    iframes: bool = True

    # CSS selectors or tag names whose text is never tagged
    exclude: list[str] = field(default_factory=list)

    # Cosmetic, passed through to previews
    theme: str = "alkotob"

    # Translation priority, first covering translation wins
    versions: list[str] = field(
        default_factory=lambda: [
            "quran",
            "injil",
            "tma",
            "zabur",
            "sabeel",
            "sbleng",
            "gnt",
        ]
    )

    # Excerpt rendering
    excerpt_length: int = 400

    # Verse endpoint
    endpoint: str = "https://alkotob.org/query"
    site_url: str = "https://alkotob.org"
    fetch_timeout: float = 10.0

    def update(self, options: dict) -> list[str]:
        """Apply known options in place.

        Args:
            options: Mapping of option name to value; camelCase names from
                the page-level settings object are accepted

        Returns:
            Names of options that were not recognized (and were ignored)
        """
        known = {f.name for f in fields(self)}
        ignored = []
        for key, value in options.items():
            name = OPTION_ALIASES.get(key, key)
            if name not in known:
                ignored.append(key)
                continue
            setattr(self, name, value)

        if ignored:
            logger.warning(f"Ignoring unknown settings: {', '.join(ignored)}")
        return ignored

    @classmethod
    def from_file(cls, path: Path | str | None = None) -> "Settings":
        """Load settings from a YAML file; a missing default file gives defaults."""
        settings = cls()
        config_path = Path(path) if path else DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path:
                raise FileNotFoundError(f"Config file not found: {config_path}")
            return settings

        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError(
                f"Config file must contain a mapping, got {type(data).__name__}"
            )
        settings.update(data)
        return settings


# Preview messages per UI language
MESSAGES = {
    "en": {
        "loading": "Loading…",
        "not_found": "Verse not found",
        "fetch_failed": "Unable to load verses",
    },
    "ar": {
        "loading": "جار التحميل…",
        "not_found": "لم يتم العثور على الآية",
        "fetch_failed": "تعذر تحميل الآيات",
    },
}


def message(language: str, key: str) -> str:
    """Look up a preview message, falling back to English."""
    return MESSAGES.get(language, MESSAGES["en"]).get(key, MESSAGES["en"][key])
