"""Static translation documents, loaded once and held read-only."""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .locale import Locale

logger = logging.getLogger(__name__)

LOCALES_DIR = Path(__file__).parent / "locales"


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, list):
        return tuple(_freeze(item) for item in value)
    return value


def _load_document(path: Path) -> Mapping[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Failed to load translations from %s: %s", path, exc)
        return MappingProxyType({})
    if not isinstance(document, dict):
        logger.error("Translation document %s is not an object", path)
        return MappingProxyType({})
    return _freeze(document)


@lru_cache(maxsize=None)
def load_translations(locales_dir: Optional[Path] = None) -> Mapping[Locale, Mapping[str, Any]]:
    """Read ``<locale>.json`` for every supported locale."""
    directory = Path(locales_dir) if locales_dir else LOCALES_DIR
    return MappingProxyType(
        {locale: _load_document(directory / f"{locale.value}.json") for locale in Locale}
    )


def lookup(document: Mapping[str, Any], key: str) -> Optional[str]:
    """Follow a dot-delimited path; only string leaves count as a hit."""
    current: Any = document
    for part in key.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return None
        current = current[part]
    return current if isinstance(current, str) else None
