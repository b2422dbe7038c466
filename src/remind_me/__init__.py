"""Remind Me - reminder tracking core (persistence, query, locale, routing)."""

__version__ = "0.3.0"
