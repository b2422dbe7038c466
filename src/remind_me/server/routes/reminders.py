"""Reminder endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException, Query

from ...reminders import UNSET, ReminderFilter, ReminderSort
from ...reminders.calendar import format_month_year, month_grid, month_summary, parse_month, today
from ...reminders.query import unscheduled
from ..dependencies import get_locale_engine, get_repository, serialize_reminder, serialize_reminders
from ..schemas import (
    CalendarDayResponse,
    CalendarResponse,
    ReminderCreateRequest,
    ReminderResponse,
    ReminderUpdateRequest,
    StatisticsResponse,
)

logger = logging.getLogger(__name__)


def register_reminder_routes(app: FastAPI) -> None:
    """Register reminder CRUD, statistics and calendar endpoints."""

    @app.get("/api/reminders", response_model=List[ReminderResponse])
    async def list_reminders(
        filter_by: str = Query(default="all", alias="filter", description="all | active | completed"),
        search: str = Query(default="", description="Case-insensitive substring of title or description"),
        sort_by: str = Query(default="date", alias="sort", description="date | title | status"),
    ) -> List[ReminderResponse]:
        """List reminders after filtering, searching and sorting."""
        repo = get_repository()
        try:
            reminders = await asyncio.to_thread(
                repo.select, ReminderFilter.parse(filter_by), search, ReminderSort.parse(sort_by)
            )
            return serialize_reminders(repo, reminders)
        except Exception as exc:
            logger.exception("Failed to list reminders: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to list reminders") from exc

    @app.post("/api/reminders", response_model=ReminderResponse, status_code=201)
    async def create_reminder(request: ReminderCreateRequest) -> ReminderResponse:
        """Create a new reminder."""
        repo = get_repository()
        try:
            reminder = await asyncio.to_thread(
                repo.create,
                request.title,
                request.description,
                request.due_date,
                request.tag_ids,
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        except Exception as exc:
            logger.exception("Failed to create reminder: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to create reminder") from exc
        return serialize_reminder(reminder, repo.tags_for(reminder))

    @app.get("/api/reminders/stats", response_model=StatisticsResponse)
    async def reminder_stats() -> StatisticsResponse:
        """Total, active, completed and overdue counts."""
        repo = get_repository()
        stats = await asyncio.to_thread(repo.statistics)
        return StatisticsResponse(**stats.to_dict())

    @app.get("/api/reminders/calendar", response_model=CalendarResponse)
    async def reminder_calendar(
        month: Optional[str] = Query(default=None, description="YYYY-MM (defaults to the current month)"),
    ) -> CalendarResponse:
        """Month grid with reminders grouped by local calendar day."""
        if month:
            parsed = parse_month(month)
            if parsed is None:
                raise HTTPException(status_code=400, detail=f"Invalid month: {month}")
            year, month_number = parsed
        else:
            year, month_number, _ = today()

        repo = get_repository()
        buckets = month_summary(year, month_number, await asyncio.to_thread(repo.calendar))
        label = format_month_year(year, month_number, get_locale_engine().current_locale)
        return CalendarResponse(
            month=f"{year:04d}-{month_number:02d}",
            label=label,
            days=[CalendarDayResponse(**cell.to_dict()) for cell in month_grid(year, month_number, buckets)],
            reminders={key: serialize_reminders(repo, items) for key, items in buckets.items()},
            unscheduled=serialize_reminders(repo, unscheduled(repo.list())),
        )

    @app.get("/api/reminders/{reminder_id}", response_model=ReminderResponse)
    async def get_reminder(reminder_id: str) -> ReminderResponse:
        """Fetch a single reminder."""
        repo = get_repository()
        reminder = await asyncio.to_thread(repo.get, reminder_id)
        if reminder is None:
            raise HTTPException(status_code=404, detail="Reminder not found")
        return serialize_reminder(reminder, repo.tags_for(reminder))

    @app.patch("/api/reminders/{reminder_id}", response_model=ReminderResponse)
    async def update_reminder(reminder_id: str, request: ReminderUpdateRequest) -> ReminderResponse:
        """Update an existing reminder."""
        repo = get_repository()
        payload = request.model_dump(exclude_unset=True)
        try:
            reminder = await asyncio.to_thread(
                lambda: repo.update(
                    reminder_id,
                    title=payload.get("title"),
                    description=payload.get("description"),
                    due_date=(payload["due_date"] or "") if "due_date" in payload else UNSET,
                    tag_ids=payload.get("tag_ids"),
                    completed=payload.get("completed"),
                )
            )
        except Exception as exc:
            logger.exception("Failed to update reminder: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to update reminder") from exc
        if reminder is None:
            raise HTTPException(status_code=404, detail="Reminder not found")
        return serialize_reminder(reminder, repo.tags_for(reminder))

    @app.post("/api/reminders/{reminder_id}/toggle", response_model=ReminderResponse)
    async def toggle_reminder(reminder_id: str) -> ReminderResponse:
        """Flip a reminder between active and completed."""
        repo = get_repository()
        reminder = await asyncio.to_thread(repo.toggle, reminder_id)
        if reminder is None:
            raise HTTPException(status_code=404, detail="Reminder not found")
        return serialize_reminder(reminder, repo.tags_for(reminder))

    @app.delete("/api/reminders/{reminder_id}")
    async def delete_reminder(reminder_id: str) -> Dict[str, bool]:
        """Delete a reminder."""
        repo = get_repository()
        deleted = await asyncio.to_thread(repo.delete, reminder_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Reminder not found")
        return {"deleted": True}
