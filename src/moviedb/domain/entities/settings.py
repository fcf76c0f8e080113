"""User preference values: language and theme."""

from __future__ import annotations

from enum import Enum


class AppLanguage(Enum):
    ENGLISH = ("en", "US")
    HINDI = ("hi", "IN")
    ARABIC = ("ar", "SA")
    HEBREW = ("he", "IL")

    def __init__(self, code: str, country_code: str) -> None:
        self.code = code
        self.country_code = country_code

    @property
    def api_tag(self) -> str:
        return f"{self.code}-{self.country_code}"

    @classmethod
    def from_code(cls, code: str) -> AppLanguage | None:
        """Look up by bare language code; ``None`` if unsupported."""
        base = code.replace("_", "-").split("-")[0].lower()
        for language in cls:
            if language.code == base:
                return language
        return None


class AppTheme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"

    @classmethod
    def from_value(cls, value: str | None) -> AppTheme:
        for theme in cls:
            if theme.value == value:
                return theme
        return cls.SYSTEM


FALLBACK_LANGUAGE = "en"
