"""
ナビゲーション

起動時のルート決定、ページ・ロケール切り替え時のURL反映、
ランディングページ内セクションへのリンクを扱う。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Tuple
from urllib.parse import parse_qs

from ..i18n.engine import LocaleEngine
from ..i18n.locale import Locale
from ..storage.base import StoragePort
from .deployment import Deployment, HostingMode
from .routes import Route, build_url_for, parse_route, path_has_locale_prefix

LANDING_SECTIONS = ("features", "how", "pricing", "faq")


@dataclass(frozen=True)
class NavigationLocation:
    """ブラウザの location に相当する値"""

    pathname: str = "/"
    hash: str = ""
    search: str = ""
    hostname: str = ""

    @classmethod
    def from_url(cls, url: str) -> "NavigationLocation":
        """"/repo/en/app?x=1#frag" のような相対URLを分解する"""
        rest, _, fragment = (url or "").partition("#")
        path, _, query = rest.partition("?")
        return cls(
            pathname=path or "/",
            hash=f"#{fragment}" if fragment else "",
            search=f"?{query}" if query else "",
        )


class NavigationHost(Protocol):
    """URLを書き換える先（ブラウザの history / location に相当）"""

    def push_state(self, url: str) -> bool:
        """履歴にURLを追加する。利用できない場合はFalse"""
        ...

    def replace_state(self, url: str) -> bool:
        """現在の履歴エントリを置き換える。利用できない場合はFalse"""
        ...

    def set_hash(self, fragment: str) -> None:
        """ハッシュのみを書き換える"""
        ...


def resolve_initial_route(
    location: NavigationLocation,
    deployment: Deployment,
    saved_locale: Optional[Locale] = None,
    default: Locale = Locale.EN,
) -> Tuple[Route, Locale]:
    """
    起動時の (Route, Locale) を決める

    - ハッシュがあればパスより優先する
    - パスはロケールが明示されている場合のみ採用する
    - どちらにもロケールが無ければ保存済み設定（無ければdefault）を使い、
      ルートは Landing とする
    """
    base = deployment.base_path
    fallback = saved_locale if saved_locale is not None else default

    fragment = location.hash or ""
    if fragment.lstrip("#"):
        route, locale = parse_route(fragment, base)
        if path_has_locale_prefix(fragment, base):
            return route, locale
        return route, fallback

    if path_has_locale_prefix(location.pathname, base):
        return parse_route(location.pathname, base)

    return Route.LANDING, fallback


def landing_section_href(section: str, locale: Locale, deployment: Deployment) -> str:
    """ランディングページ内セクションへのリンク（?section=...）"""
    if section not in LANDING_SECTIONS:
        raise ValueError(f"Unknown landing section: {section}")
    base = build_url_for(Route.LANDING, locale, deployment)
    return f"{base}?section={section}"


def section_from_url(location: NavigationLocation) -> Optional[str]:
    """
    URLから表示対象のランディングセクションを取り出す

    検索文字列、ハッシュ内のクエリ、旧形式のアンカー（#pricing）の順に見る。
    """
    candidates = [location.search.lstrip("?")]
    fragment = (location.hash or "").lstrip("#")
    if "?" in fragment:
        candidates.append(fragment.split("?", 1)[1])

    for query in candidates:
        values = parse_qs(query).get("section", [])
        for value in values:
            if value in LANDING_SECTIONS:
                return value

    anchor = fragment.lstrip("/")
    if anchor in LANDING_SECTIONS:
        return anchor
    return None


class Navigator:
    """現在のルートとロケールを保持し、変更をURLとロケール設定に反映する"""

    def __init__(
        self,
        deployment: Deployment,
        locale_engine: LocaleEngine,
        route: Route = Route.LANDING,
        host: Optional[NavigationHost] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.deployment = deployment
        self.locale_engine = locale_engine
        self.host = host
        self.logger = logger or logging.getLogger(__name__)
        self._route = route

    @classmethod
    def start(
        cls,
        location: NavigationLocation,
        deployment: Deployment,
        storage: Optional[StoragePort] = None,
        host: Optional[NavigationHost] = None,
        default: Locale = Locale.EN,
        translations: Optional[Mapping[Locale, Mapping[str, Any]]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "Navigator":
        """現在のURLと保存済み設定から初期状態を作る（保存は行わない）"""
        engine = LocaleEngine(storage=storage, translations=translations, locale=default, logger=logger)
        route, locale = resolve_initial_route(location, deployment, engine.saved_locale(), default)
        engine.set_locale(locale, persist=False)
        navigator = cls(deployment, engine, route=route, host=host, logger=logger)
        navigator.logger.debug("Initial route: %s (%s)", route.value, locale.value)
        return navigator

    @property
    def route(self) -> Route:
        return self._route

    @property
    def locale(self) -> Locale:
        return self.locale_engine.current_locale

    @property
    def current_url(self) -> str:
        return build_url_for(self._route, self.locale, self.deployment)

    def navigate(self, route: Route, locale: Optional[Locale] = None) -> str:
        """
        ページ（と必要ならロケール）を切り替え、URLを反映する

        ロケールが変わった場合は設定を保存する。保存やURL反映に失敗しても
        画面上の切り替えは行われる。

        Returns:
            str: 反映した正規URL
        """
        locale = locale or self.locale
        if locale is not self.locale:
            self.locale_engine.set_locale(locale)
        self._route = route

        url = self.current_url
        self._apply(url, route.to_hash(locale))
        return url

    def set_locale(self, locale: Locale) -> str:
        """現在のページのままロケールを切り替える"""
        return self.navigate(self._route, locale)

    def canonicalize(self) -> str:
        """現在のURLを正規形に置き換える（履歴は増やさない）"""
        url = self.current_url
        self._apply(url, self._route.to_hash(self.locale), replace=True)
        return url

    def section_href(self, section: str) -> str:
        return landing_section_href(section, self.locale, self.deployment)

    def _apply(self, url: str, fragment: str, replace: bool = False) -> None:
        if self.host is None:
            return
        if self.deployment.hosting_mode is HostingMode.STATIC:
            self.host.set_hash(fragment)
            return
        method = self.host.replace_state if replace else self.host.push_state
        try:
            pushed = method(url)
        except Exception as exc:
            self.logger.warning("History update failed for %s: %s", url, exc)
            pushed = False
        if not pushed:
            self.logger.debug("History unavailable, falling back to hash: %s", fragment)
            self.host.set_hash(fragment)
