"""URL <-> (Route, Locale) resolution and navigation."""

from .deployment import Deployment, HostingMode, detect_deployment, normalize_base_path, resolve_deployment
from .navigator import (
    LANDING_SECTIONS,
    NavigationHost,
    NavigationLocation,
    Navigator,
    landing_section_href,
    resolve_initial_route,
    section_from_url,
)
from .routes import Route, build_url, build_url_for, parse_route, path_has_locale_prefix, strip_base_path

__all__ = [
    "Deployment",
    "HostingMode",
    "detect_deployment",
    "normalize_base_path",
    "resolve_deployment",
    "LANDING_SECTIONS",
    "NavigationHost",
    "NavigationLocation",
    "Navigator",
    "landing_section_href",
    "resolve_initial_route",
    "section_from_url",
    "Route",
    "build_url",
    "build_url_for",
    "parse_route",
    "path_has_locale_prefix",
    "strip_base_path",
]
