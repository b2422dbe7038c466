"""Tag endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List

from fastapi import FastAPI, HTTPException

from ..dependencies import get_repository, serialize_tag
from ..schemas import TagCreateRequest, TagResponse, TagUpdateRequest

logger = logging.getLogger(__name__)


def register_tag_routes(app: FastAPI) -> None:
    """Register tag CRUD endpoints."""

    @app.get("/api/tags", response_model=List[TagResponse])
    async def list_tags() -> List[TagResponse]:
        repo = get_repository()
        return [serialize_tag(tag) for tag in await asyncio.to_thread(repo.list_tags)]

    @app.post("/api/tags", response_model=TagResponse, status_code=201)
    async def create_tag(request: TagCreateRequest) -> TagResponse:
        """Create a tag; the color must be a hex code."""
        repo = get_repository()
        try:
            tag = await asyncio.to_thread(repo.create_tag, request.name, request.color)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return serialize_tag(tag)

    @app.patch("/api/tags/{tag_id}", response_model=TagResponse)
    async def update_tag(tag_id: str, request: TagUpdateRequest) -> TagResponse:
        repo = get_repository()
        try:
            tag = await asyncio.to_thread(
                lambda: repo.update_tag(tag_id, name=request.name, color=request.color)
            )
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        if tag is None:
            raise HTTPException(status_code=404, detail="Tag not found")
        return serialize_tag(tag)

    @app.delete("/api/tags/{tag_id}")
    async def delete_tag(tag_id: str) -> Dict[str, bool]:
        """Delete a tag. Reminders keep the id and render it as untagged."""
        repo = get_repository()
        deleted = await asyncio.to_thread(repo.delete_tag, tag_id)
        if not deleted:
            raise HTTPException(status_code=404, detail="Tag not found")
        logger.info("Tag deleted: %s", tag_id)
        return {"deleted": True}
