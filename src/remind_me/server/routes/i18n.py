"""Locale preference and translation endpoints."""

from __future__ import annotations

import asyncio
from typing import Optional

from fastapi import FastAPI, Query

from ...i18n import Locale
from ..dependencies import get_locale_engine
from ..schemas import LocaleResponse, LocaleUpdateRequest, TranslationResponse


def register_i18n_routes(app: FastAPI) -> None:
    """Register locale endpoints."""

    @app.get("/api/i18n/locale", response_model=LocaleResponse)
    async def get_locale() -> LocaleResponse:
        engine = get_locale_engine()
        return LocaleResponse(locale=engine.current_locale.value)

    @app.put("/api/i18n/locale", response_model=LocaleResponse)
    async def set_locale(request: LocaleUpdateRequest) -> LocaleResponse:
        """Switch the display locale and persist it. Unknown values fall back to English."""
        engine = get_locale_engine()
        saved = await asyncio.to_thread(engine.set_locale, Locale.parse(request.locale))
        return LocaleResponse(locale=engine.current_locale.value, saved=saved)

    @app.get("/api/i18n/translate", response_model=TranslationResponse)
    async def translate(
        key: str = Query(..., description="Dot-delimited key, e.g. app.header.title"),
        locale: Optional[str] = Query(default=None, description="Defaults to the current locale"),
    ) -> TranslationResponse:
        engine = get_locale_engine()
        target = Locale.parse(locale) if locale else engine.current_locale
        return TranslationResponse(key=key, locale=target.value, value=engine.t(key, target))
