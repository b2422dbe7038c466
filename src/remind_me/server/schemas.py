"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response for health check endpoint."""

    status: str
    version: str
    storage_ok: bool = Field(
        default=True, description="False when the most recent write did not reach storage"
    )


class TagResponse(BaseModel):
    """Tag representation returned by the API."""

    id: str
    name: str
    color: str


class TagCreateRequest(BaseModel):
    """Request body for creating a tag."""

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default="#FA8A59", description="Hex color such as #FA8A59")


class TagUpdateRequest(BaseModel):
    """Request body for updating a tag."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    color: Optional[str] = None


class ReminderResponse(BaseModel):
    """Reminder representation returned by the API."""

    id: str
    title: str
    description: str
    due_date: str = Field(..., description="RFC 3339, offset-less local 'YYYY-MM-DDTHH:MM', or empty")
    completed: bool
    created_at: str
    tag_ids: List[str] = Field(default_factory=list)
    tags: List[TagResponse] = Field(default_factory=list, description="Tags that still exist")
    due_display: str = ""
    overdue: bool = False


class ReminderCreateRequest(BaseModel):
    """Request body for creating a reminder."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(default="", max_length=2000)
    due_date: str = Field(default="", description="'YYYY-MM-DDTHH:MM' (local) or RFC 3339")
    tag_ids: List[str] = Field(default_factory=list)


class ReminderUpdateRequest(BaseModel):
    """Request body for updating a reminder; omitted fields are left unchanged."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[str] = Field(default=None, description="null or empty string clears the due date")
    tag_ids: Optional[List[str]] = None
    completed: Optional[bool] = None


class StatisticsResponse(BaseModel):
    """Aggregate counts over all reminders."""

    total: int
    active: int
    completed: int
    overdue: int


class CalendarDayResponse(BaseModel):
    """One cell of a month grid."""

    in_month: bool
    day: int
    date_key: str
    count: int


class CalendarResponse(BaseModel):
    """Month view with reminders bucketed by local calendar day."""

    month: str
    label: str
    days: List[CalendarDayResponse]
    reminders: Dict[str, List[ReminderResponse]]
    unscheduled: List[ReminderResponse]


class LocaleResponse(BaseModel):
    """Current display locale."""

    locale: str
    saved: bool = Field(default=True, description="False when the preference could not be persisted")


class LocaleUpdateRequest(BaseModel):
    """Request body for switching locale."""

    locale: str = Field(..., description="en, zh-Hans, zh-Hant or an alias such as zh-CN / zh-TW")


class TranslationResponse(BaseModel):
    """Resolved translation string."""

    key: str
    locale: str
    value: str


class RouteResponse(BaseModel):
    """A resolved (route, locale) pair and its canonical URL."""

    route: str
    locale: str
    url: str
