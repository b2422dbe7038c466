"""
ロケールエンジン

起動時のロケール決定（URL → 保存済み設定 → デフォルト）と、
ドット区切りキーによる翻訳（現在ロケール → 英語 → キーそのもの）を提供する。
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..exceptions import StorageError
from ..storage.base import LOCALE_KEY, StoragePort
from .locale import Locale
from .translations import load_translations, lookup


class LocaleEngine:
    """現在のロケールを保持し、翻訳と設定の永続化を行う"""

    def __init__(
        self,
        storage: Optional[StoragePort] = None,
        translations: Optional[Mapping[Locale, Mapping[str, Any]]] = None,
        locale: Locale = Locale.EN,
        logger: Optional[logging.Logger] = None,
    ):
        self.storage = storage
        self.translations = translations if translations is not None else load_translations()
        self.logger = logger or logging.getLogger(__name__)
        self._current = locale

    @classmethod
    def at_startup(
        cls,
        storage: Optional[StoragePort] = None,
        url_locale: Optional[Locale] = None,
        default: Locale = Locale.EN,
        translations: Optional[Mapping[Locale, Mapping[str, Any]]] = None,
        logger: Optional[logging.Logger] = None,
    ) -> "LocaleEngine":
        """
        起動時のロケールを決定して生成する

        Args:
            storage: 保存済みロケール設定の読み込み先
            url_locale: 現在のURL（パスまたはハッシュ）に明示されたロケール
            default: どちらも無い場合のロケール
        """
        engine = cls(storage=storage, translations=translations, locale=default, logger=logger)
        if url_locale is not None:
            engine._current = url_locale
        else:
            saved = engine.saved_locale()
            if saved is not None:
                engine._current = saved
        engine.logger.debug("Startup locale: %s", engine._current.value)
        return engine

    @property
    def current_locale(self) -> Locale:
        return self._current

    def saved_locale(self) -> Optional[Locale]:
        """保存済みのロケール設定。無い場合はNone"""
        if self.storage is None:
            return None
        try:
            raw = self.storage.get(LOCALE_KEY)
        except Exception as exc:
            self.logger.warning("Failed to read locale preference: %s", exc)
            return None
        if not raw or not raw.strip():
            return None
        return Locale.parse(raw)

    def set_locale(self, locale: Locale, persist: bool = True) -> bool:
        """
        ロケールを切り替えて保存する

        メモリ上の切り替えは常に成功する。戻り値は保存できたかどうか。
        persist=False の場合は切り替えのみ行い、Falseを返す。
        """
        self._current = locale
        if self.storage is None or not persist:
            return False
        try:
            self.storage.set(LOCALE_KEY, locale.value)
        except StorageError as exc:
            self.logger.warning("Failed to persist locale %s (%s): %s", locale.value, exc.kind.value, exc)
            return False
        return True

    def get_translation(self, locale: Locale, key: str) -> Optional[str]:
        document = self.translations.get(locale)
        if document is None:
            return None
        return lookup(document, key)

    def translate(self, key: str, locale: Optional[Locale] = None) -> str:
        """現在ロケール（またはlocale）→ 英語 → キーそのもの の順でフォールバック"""
        locale = locale or self._current
        value = self.get_translation(locale, key)
        if value is not None:
            return value
        if locale is not Locale.EN:
            value = self.get_translation(Locale.EN, key)
            if value is not None:
                return value
        return key

    t = translate
