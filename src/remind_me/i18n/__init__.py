"""Locale resolution and translation lookup."""

from .engine import LocaleEngine
from .locale import Locale, is_locale_token
from .translations import load_translations, lookup

__all__ = ["Locale", "LocaleEngine", "is_locale_token", "load_translations", "lookup"]
