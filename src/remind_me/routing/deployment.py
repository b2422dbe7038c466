"""Deployment environment: base path and hosting mode."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..config import RoutingConfig
from ..i18n.locale import is_locale_token


class HostingMode(str, Enum):
    """SERVER: サーバー側でルーティング可能（パス形式URL）。STATIC: 静的ホスティング（ハッシュ形式URL）"""

    SERVER = "server"
    STATIC = "static"

    @classmethod
    def parse(cls, value: Optional[str]) -> "HostingMode":
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.SERVER


def normalize_base_path(base_path: Optional[str]) -> str:
    """"repo/" -> "/repo"、"/" や空文字 -> "" """
    base = (base_path or "").strip().strip("/")
    return f"/{base}" if base else ""


@dataclass(frozen=True)
class Deployment:
    """配信先のベースパスとホスティングモード"""

    base_path: str = ""
    hosting_mode: HostingMode = HostingMode.SERVER

    def __post_init__(self):
        object.__setattr__(self, "base_path", normalize_base_path(self.base_path))

    @property
    def prefers_hash(self) -> bool:
        return self.hosting_mode is HostingMode.STATIC


def detect_deployment(
    hostname: str,
    pathname: str = "/",
    static_host_suffix: str = "github.io",
) -> Deployment:
    """
    ホスト名から配信環境を推定する

    静的ホスティング（例: <user>.github.io/<repo>/）ではパスの先頭セグメントを
    ベースパスとし、ハッシュ形式URLを使う。それ以外はサーバールーティング。
    """
    host = (hostname or "").split(":", 1)[0].lower()
    if not static_host_suffix or not host.endswith(static_host_suffix.lower()):
        return Deployment()

    first = next((part for part in (pathname or "").split("/") if part), "")
    if first.startswith("#") or "?" in first or is_locale_token(first):
        first = ""
    return Deployment(base_path=first, hosting_mode=HostingMode.STATIC)


def resolve_deployment(config: RoutingConfig, hostname: str, pathname: str = "/") -> Deployment:
    """
    設定とホスト名から配信環境を決める

    設定で明示された base_path と hosting_mode（"auto" 以外）は検出結果より優先する。
    """
    detected = detect_deployment(hostname, pathname, config.static_host_suffix)
    base_path = config.base_path or detected.base_path
    if config.hosting_mode == "auto":
        hosting_mode = detected.hosting_mode
    else:
        hosting_mode = HostingMode.parse(config.hosting_mode)
    return Deployment(base_path=base_path, hosting_mode=hosting_mode)
