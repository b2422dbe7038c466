"""Route parsing and URL building endpoints."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request

from ...i18n import Locale
from ...routing import Deployment, HostingMode, Route, build_url_for, parse_route
from ..dependencies import get_deployment
from ..schemas import RouteResponse


def _deployment(
    request: Request,
    hostname: Optional[str],
    pathname: str,
    mode: Optional[str],
    base_path: Optional[str],
) -> Deployment:
    detected = get_deployment(hostname or request.url.hostname or "", pathname)
    return Deployment(
        base_path=detected.base_path if base_path is None else base_path,
        hosting_mode=detected.hosting_mode if mode is None else HostingMode.parse(mode),
    )


def register_navigation_routes(app: FastAPI) -> None:
    """Register navigation helpers."""

    @app.get("/api/navigation/parse", response_model=RouteResponse)
    async def parse(
        request: Request,
        path: str = Query(..., description="Pathname or hash, e.g. /zh-Hant/app or #/en/privacy"),
        hostname: Optional[str] = Query(default=None, description="Browser host; defaults to the request host"),
        mode: Optional[str] = Query(default=None, description="server | static"),
        base_path: Optional[str] = Query(default=None),
    ) -> RouteResponse:
        """Resolve a URL to its page and locale, plus the canonical URL for them."""
        deployment = _deployment(request, hostname, path, mode, base_path)
        route, locale = parse_route(path, deployment.base_path)
        return RouteResponse(route=route.value, locale=locale.value, url=build_url_for(route, locale, deployment))

    @app.get("/api/navigation/build", response_model=RouteResponse)
    async def build(
        request: Request,
        route: str = Query(default="landing", description="landing | app | privacy | terms"),
        locale: str = Query(default="en"),
        hostname: Optional[str] = Query(default=None, description="Browser host; defaults to the request host"),
        pathname: str = Query(default="/", description="Current pathname, used to detect the base path"),
        mode: Optional[str] = Query(default=None, description="server | static"),
        base_path: Optional[str] = Query(default=None),
    ) -> RouteResponse:
        try:
            target = Route(route)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=f"Unknown route: {route}") from exc
        resolved = Locale.parse(locale)
        deployment = _deployment(request, hostname, pathname, mode, base_path)
        return RouteResponse(
            route=target.value, locale=resolved.value, url=build_url_for(target, resolved, deployment)
        )
