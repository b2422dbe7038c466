"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from datetime import tzinfo
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from ..config import Config
from ..i18n import Locale, LocaleEngine, load_translations
from ..logger import setup_logger
from ..reminders import Reminder, ReminderRepository, ReminderStore, Tag, format_for_display, is_overdue
from ..routing import Deployment, resolve_deployment
from ..storage import StoragePort, create_storage
from .schemas import ReminderResponse, TagResponse


@lru_cache(maxsize=1)
def get_config() -> Config:
    """Load configuration once and configure logging from it."""
    config = Config.load()
    setup_logger(log_level=config.log_level, log_file=config.log_file)
    return config


@lru_cache(maxsize=1)
def get_storage() -> StoragePort:
    """Singleton storage backend selected by configuration."""
    return create_storage(get_config().storage)


@lru_cache(maxsize=1)
def get_repository() -> ReminderRepository:
    """Singleton ReminderRepository, loaded (and migrated) on first use."""
    return ReminderRepository(ReminderStore(get_storage()))


@lru_cache(maxsize=1)
def get_locale_engine() -> LocaleEngine:
    """Singleton LocaleEngine restored from the saved preference."""
    config = get_config()
    locales_dir = Path(config.i18n.locales_dir) if config.i18n.locales_dir else None
    return LocaleEngine.at_startup(
        get_storage(),
        default=Locale.parse(config.i18n.default_locale),
        translations=load_translations(locales_dir),
    )


def get_deployment(hostname: str, pathname: str = "/") -> Deployment:
    """Base path and hosting mode for a request, configured values winning over detection."""
    return resolve_deployment(get_config().routing, hostname, pathname)


def reset_dependencies() -> None:
    """Drop cached singletons so the next request reloads configuration."""
    for getter in (get_config, get_storage, get_repository, get_locale_engine):
        getter.cache_clear()


def serialize_tag(tag: Tag) -> TagResponse:
    return TagResponse(id=tag.id, name=tag.name, color=tag.color)


def serialize_reminder(
    reminder: Reminder, tags: Optional[List[Tag]] = None, tz: Optional[tzinfo] = None
) -> ReminderResponse:
    """Convert a domain Reminder to an API response, resolving its tags."""
    overdue = bool(reminder.due_date) and not reminder.completed and is_overdue(reminder.due_date, tz=tz)
    return ReminderResponse(
        id=reminder.id,
        title=reminder.title,
        description=reminder.description,
        due_date=reminder.due_date,
        completed=reminder.completed,
        created_at=reminder.created_at,
        tag_ids=list(reminder.tag_ids),
        tags=[serialize_tag(tag) for tag in tags or []],
        due_display=format_for_display(reminder.due_date, tz) if reminder.due_date else "",
        overdue=overdue,
    )


def serialize_reminders(repo: ReminderRepository, reminders: List[Reminder]) -> List[ReminderResponse]:
    return [serialize_reminder(reminder, repo.tags_for(reminder)) for reminder in reminders]
