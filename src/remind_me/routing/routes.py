"""
ルート（ページ）とロケールの組をURLとの間で相互変換する

パス形式:   {base_path}/{locale}/{page}
ハッシュ形式: {base_path}/#/{locale}/{page}
"""

from __future__ import annotations

from enum import Enum
from typing import Tuple

from ..i18n.locale import Locale, is_locale_token
from .deployment import Deployment, HostingMode, normalize_base_path


class Route(str, Enum):
    """アプリのページ"""

    LANDING = "landing"
    APP = "app"
    PRIVACY_POLICY = "privacy"
    TERMS_OF_USE = "terms"

    @property
    def segment(self) -> str:
        """URL上のページキーワード（ランディングは空）"""
        return "" if self is Route.LANDING else self.value

    @classmethod
    def from_segment(cls, segment: str) -> "Route":
        for route in cls:
            if route is not Route.LANDING and route.value == segment:
                return route
        return cls.LANDING

    def to_path(self, locale: Locale) -> str:
        return f"/{locale.value}/{self.segment}"

    def to_hash(self, locale: Locale) -> str:
        return f"#{self.to_path(locale)}"


def strip_base_path(path: str, base_path: str) -> str:
    """path が base_path で始まる場合のみ取り除く（"/repo" は "/repository" に一致しない）"""
    base = normalize_base_path(base_path)
    if not base or not path.startswith(base):
        return path
    rest = path[len(base):]
    if rest and rest[0] not in "/#?":
        return path
    return rest


def _segments(path: str) -> list:
    path = path.split("?", 1)[0]
    return [part for part in path.split("/") if part]


def path_has_locale_prefix(path: str, base_path: str = "") -> bool:
    """先頭セグメント（'#' とベースパスを除く）がロケール指定ならTrue"""
    path = strip_base_path((path or "").lstrip("#"), base_path)
    parts = _segments(path)
    return bool(parts) and is_locale_token(parts[0])


def parse_route(path_or_hash: str, base_path: str = "") -> Tuple[Route, Locale]:
    """
    パスまたはハッシュ文字列を (Route, Locale) に変換する

    1. base_path を取り除く
    2. '#' の後ろにロケール付きのパスがあればそちらを優先する
    3. 先頭セグメントがロケールなら次のセグメントをページとして解釈
       （無い・未知のキーワードはLanding）
    4. ロケールが無い場合は "/app" または "#app" を含めば App、それ以外は Landing（いずれも英語）
    """
    stripped = strip_base_path(path_or_hash or "", base_path)
    remainder = stripped

    if "#" in remainder:
        before, fragment = remainder.split("#", 1)
        remainder = fragment if path_has_locale_prefix(fragment, base_path) else before
        remainder = strip_base_path(remainder, base_path)

    parts = _segments(remainder)
    if parts and is_locale_token(parts[0]):
        locale = Locale.parse(parts[0])
        route = Route.from_segment(parts[1]) if len(parts) >= 2 else Route.LANDING
        return route, locale

    # legacy bare paths
    if "/app" in stripped or "#app" in stripped:
        return Route.APP, Locale.EN
    return Route.LANDING, Locale.EN


def build_url(
    route: Route,
    locale: Locale,
    hosting_mode: HostingMode = HostingMode.SERVER,
    base_path: str = "",
) -> str:
    """
    (Route, Locale) から正規URLを組み立てる

    静的ホスティングではディープリンクの404を避けるためハッシュ形式にする。
    """
    base = normalize_base_path(base_path)
    if hosting_mode is HostingMode.STATIC:
        prefix = f"{base}/" if base else ""
        return f"{prefix}{route.to_hash(locale)}"
    return f"{base}{route.to_path(locale)}"


def build_url_for(route: Route, locale: Locale, deployment: Deployment) -> str:
    return build_url(route, locale, deployment.hosting_mode, deployment.base_path)
