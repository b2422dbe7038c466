"""Supported locales and their string projections."""

from __future__ import annotations

from enum import Enum
from typing import Optional

_TRADITIONAL_REGIONS = ("tw", "hk", "mo")


class Locale(str, Enum):
    """対応ロケール（BCP 47風の文字列値を持つ）"""

    EN = "en"
    ZH_HANS = "zh-Hans"
    ZH_HANT = "zh-Hant"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Locale":
        """
        ロケール文字列を解釈する（例外は送出しない）

        zh / zh-CN / zh-Hans* / その他のzh-* -> ZH_HANS
        zh-Hant* / zh-TW / zh-HK / zh-MO     -> ZH_HANT
        それ以外                             -> EN
        """
        token = (value or "").strip().replace("_", "-").lower()
        if token == "zh":
            return cls.ZH_HANS
        if token.startswith("zh-"):
            subtags = token.split("-")[1:]
            if "hant" in subtags or any(tag in _TRADITIONAL_REGIONS for tag in subtags):
                return cls.ZH_HANT
            return cls.ZH_HANS
        return cls.EN

    @property
    def is_chinese(self) -> bool:
        return self is not Locale.EN


def is_locale_token(token: str) -> bool:
    """URLの先頭セグメントがロケール指定かどうか（en / zh / zh-*）"""
    token = token.lower()
    return token == "en" or token == "zh" or token.startswith("zh-")
