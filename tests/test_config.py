"""設定読み込みのテスト"""

import pytest

from remind_me.config import Config, RoutingConfig, StorageConfig
from remind_me.exceptions import ConfigurationError


def test_defaults():
    config = Config()
    assert config.storage.backend == "file"
    assert config.routing.hosting_mode == "auto"
    assert config.routing.base_path == ""
    assert config.i18n.default_locale == "en"
    assert config.log_level == "INFO"


def test_bundled_config_file_loads():
    config = Config.from_yaml()
    assert config.storage.backend in ("file", "sqlite", "memory")
    assert config.routing.static_host_suffix == "github.io"


def test_from_yaml(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text(
        "storage:\n"
        "  backend: sqlite\n"
        "  data_dir: /tmp/remind\n"
        "routing:\n"
        "  base_path: remind-me/\n"
        "  hosting_mode: static\n"
        "i18n:\n"
        "  default_locale: zh-Hant\n"
        "log:\n"
        "  level: DEBUG\n"
        "  file: ''\n",
        encoding="utf-8",
    )
    config = Config.from_yaml(path)
    assert config.storage.backend == "sqlite"
    assert config.storage.data_dir == "/tmp/remind"
    assert config.storage.sqlite_file == "remind_me.db"
    assert config.routing.base_path == "/remind-me"
    assert config.routing.hosting_mode == "static"
    assert config.i18n.default_locale == "zh-Hant"
    assert config.log_level == "DEBUG"
    assert config.log_file == ""


def test_empty_yaml_uses_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert Config.from_yaml(path) == Config()


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        Config.from_yaml(path)


def test_invalid_values_are_rejected():
    with pytest.raises(ConfigurationError):
        StorageConfig(backend="redis")
    with pytest.raises(ConfigurationError):
        RoutingConfig(hosting_mode="cdn")


def test_from_env(monkeypatch):
    monkeypatch.setenv("REMIND_ME_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("REMIND_ME_BASE_PATH", "/pwa")
    monkeypatch.setenv("REMIND_ME_HOSTING_MODE", "static")
    monkeypatch.setenv("REMIND_ME_DEFAULT_LOCALE", "zh-Hans")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    config = Config.from_env()
    assert config.storage.backend == "memory"
    assert config.routing.base_path == "/pwa"
    assert config.routing.hosting_mode == "static"
    assert config.i18n.default_locale == "zh-Hans"
    assert config.log_level == "WARNING"


def test_load_prefers_explicit_path_then_env(tmp_path, monkeypatch):
    explicit = tmp_path / "explicit.yaml"
    explicit.write_text("storage:\n  backend: memory\n", encoding="utf-8")
    from_env = tmp_path / "env.yaml"
    from_env.write_text("storage:\n  backend: sqlite\n", encoding="utf-8")

    monkeypatch.setenv("REMIND_ME_CONFIG", str(from_env))
    assert Config.load(explicit).storage.backend == "memory"
    assert Config.load().storage.backend == "sqlite"
