"""ロケールエンジンのテスト"""

import json

import pytest

from remind_me.i18n import Locale, LocaleEngine, is_locale_token, load_translations, lookup
from remind_me.i18n.translations import LOCALES_DIR
from remind_me.storage import MemoryStorage


@pytest.mark.parametrize(
    "value,expected",
    [
        ("en", Locale.EN),
        ("EN-us", Locale.EN),
        ("zh", Locale.ZH_HANS),
        ("zh-CN", Locale.ZH_HANS),
        ("zh_cn", Locale.ZH_HANS),
        ("zh-Hans", Locale.ZH_HANS),
        ("zh-SG", Locale.ZH_HANS),
        ("zh-TW", Locale.ZH_HANT),
        ("zh-hk", Locale.ZH_HANT),
        ("zh-Hant", Locale.ZH_HANT),
        ("zh-Hant-TW", Locale.ZH_HANT),
        ("fr", Locale.EN),
        ("", Locale.EN),
        (None, Locale.EN),
    ],
)
def test_locale_parse(value, expected):
    assert Locale.parse(value) is expected


def test_locale_tokens():
    assert is_locale_token("en")
    assert is_locale_token("zh")
    assert is_locale_token("zh-Hant")
    assert not is_locale_token("app")
    assert not is_locale_token("english")


def test_chinese_locales():
    assert Locale.ZH_HANS.is_chinese
    assert Locale.ZH_HANT.is_chinese
    assert not Locale.EN.is_chinese


def test_all_locale_documents_share_the_same_keys():
    def leaf_keys(document, prefix=""):
        keys = set()
        for key, value in document.items():
            path = f"{prefix}{key}"
            if isinstance(value, dict):
                keys |= leaf_keys(value, path + ".")
            else:
                keys.add(path)
        return keys

    documents = {
        locale: json.loads((LOCALES_DIR / f"{locale.value}.json").read_text(encoding="utf-8"))
        for locale in Locale
    }
    english = leaf_keys(documents[Locale.EN])
    for locale, document in documents.items():
        assert leaf_keys(document) == english, locale


def test_translate_current_locale():
    engine = LocaleEngine(locale=Locale.ZH_HANS)
    assert engine.t("nav.privacy") == load_translations()[Locale.ZH_HANS]["nav"]["privacy"]
    assert engine.t("nav.privacy") != engine.t("nav.privacy", Locale.EN)


def test_translate_falls_back_to_english_then_key():
    translations = {
        Locale.EN: {"only": {"english": "Hello"}, "section": {"leaf": "x"}},
        Locale.ZH_HANS: {},
        Locale.ZH_HANT: {},
    }
    engine = LocaleEngine(translations=translations, locale=Locale.ZH_HANT)
    assert engine.t("only.english") == "Hello"
    assert engine.t("missing.key") == "missing.key"
    # 非文字列（セクション）はヒット扱いしない
    assert engine.t("section") == "section"


def test_lookup_only_returns_string_leaves():
    document = {"a": {"b": "text", "n": 3}}
    assert lookup(document, "a.b") == "text"
    assert lookup(document, "a.n") is None
    assert lookup(document, "a") is None
    assert lookup(document, "a.b.c") is None


def test_translation_documents_are_read_only():
    documents = load_translations()
    with pytest.raises(TypeError):
        documents[Locale.EN]["nav"]["home"] = "changed"


def test_startup_priority_url_then_saved_then_default():
    storage = MemoryStorage({"remind-me-locale": "zh-Hant"})
    assert LocaleEngine.at_startup(storage, url_locale=Locale.ZH_HANS).current_locale is Locale.ZH_HANS
    assert LocaleEngine.at_startup(storage).current_locale is Locale.ZH_HANT
    assert LocaleEngine.at_startup(MemoryStorage()).current_locale is Locale.EN
    assert LocaleEngine.at_startup(MemoryStorage(), default=Locale.ZH_HANS).current_locale is Locale.ZH_HANS


def test_set_locale_persists_bare_code():
    storage = MemoryStorage()
    engine = LocaleEngine(storage=storage)
    assert engine.set_locale(Locale.ZH_HANS) is True
    assert storage.get("remind-me-locale") == "zh-Hans"
    assert engine.saved_locale() is Locale.ZH_HANS


def test_set_locale_switches_even_when_storage_fails():
    engine = LocaleEngine(storage=MemoryStorage(available=False))
    assert engine.set_locale(Locale.ZH_HANT) is False
    assert engine.current_locale is Locale.ZH_HANT


def test_set_locale_without_persist():
    storage = MemoryStorage()
    engine = LocaleEngine(storage=storage)
    assert engine.set_locale(Locale.ZH_HANT, persist=False) is False
    assert engine.current_locale is Locale.ZH_HANT
    assert storage.get("remind-me-locale") is None


def test_missing_locales_dir_degrades_to_keys(tmp_path):
    engine = LocaleEngine(translations=load_translations(tmp_path))
    assert engine.t("nav.home") == "nav.home"
