"""
設定管理モジュール

関連クラス:
  - storage.create_storage: storage設定からStoragePort実装を選ぶ
  - routing.Deployment: routing設定からベースパスとホスティングモードを決める
  - i18n.LocaleEngine: i18n設定のデフォルトロケールを使用
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .exceptions import ConfigurationError

STORAGE_BACKENDS = ("file", "sqlite", "memory")
HOSTING_MODES = ("auto", "server", "static")


@dataclass
class StorageConfig:
    """ストレージ設定"""

    backend: str = "file"
    data_dir: str = "data"
    sqlite_file: str = "remind_me.db"

    def __post_init__(self):
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"Unknown storage backend: {self.backend!r} (expected one of {', '.join(STORAGE_BACKENDS)})"
            )


@dataclass
class RoutingConfig:
    """ルーティング設定"""

    base_path: str = ""
    hosting_mode: str = "auto"
    static_host_suffix: str = "github.io"

    def __post_init__(self):
        if self.hosting_mode not in HOSTING_MODES:
            raise ConfigurationError(
                f"Unknown hosting mode: {self.hosting_mode!r} (expected one of {', '.join(HOSTING_MODES)})"
            )
        # "/repo/" -> "/repo"
        base = self.base_path.strip()
        if base and not base.startswith("/"):
            base = "/" + base
        self.base_path = base.rstrip("/")


@dataclass
class I18nConfig:
    """多言語設定"""

    default_locale: str = "en"
    locales_dir: Optional[str] = None


@dataclass
class Config:
    """アプリケーション設定クラス"""

    storage: StorageConfig = None  # type: ignore
    routing: RoutingConfig = None  # type: ignore
    i18n: I18nConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/remind_me.log"

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.storage is None:
            self.storage = StorageConfig()
        if self.routing is None:
            self.routing = RoutingConfig()
        if self.i18n is None:
            self.i18n = I18nConfig()

    @staticmethod
    def default_path() -> Path:
        project_root = Path(__file__).resolve().parents[2]
        return project_root / "config" / "app_config.yaml"

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時はconfig/app_config.yamlを使用）

        Returns:
            Config: 設定インスタンス
        """
        if config_path is None:
            config_path = cls.default_path()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        if not isinstance(yaml_data, dict):
            raise ConfigurationError(f"Config root must be a mapping: {config_path}")

        storage_data = yaml_data.get("storage") or {}
        routing_data = yaml_data.get("routing") or {}
        i18n_data = yaml_data.get("i18n") or {}
        log_data = yaml_data.get("log") or {}

        return cls(
            storage=StorageConfig(
                backend=storage_data.get("backend", "file"),
                data_dir=str(storage_data.get("data_dir", "data")),
                sqlite_file=storage_data.get("sqlite_file", "remind_me.db"),
            ),
            routing=RoutingConfig(
                base_path=routing_data.get("base_path") or "",
                hosting_mode=routing_data.get("hosting_mode", "auto"),
                static_host_suffix=routing_data.get("static_host_suffix", "github.io"),
            ),
            i18n=I18nConfig(
                default_locale=i18n_data.get("default_locale", "en"),
                locales_dir=i18n_data.get("locales_dir"),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/remind_me.log"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            storage=StorageConfig(
                backend=os.getenv("REMIND_ME_STORAGE_BACKEND", "file"),
                data_dir=os.getenv("REMIND_ME_DATA_DIR", "data"),
                sqlite_file=os.getenv("REMIND_ME_SQLITE_FILE", "remind_me.db"),
            ),
            routing=RoutingConfig(
                base_path=os.getenv("REMIND_ME_BASE_PATH", ""),
                hosting_mode=os.getenv("REMIND_ME_HOSTING_MODE", "auto"),
                static_host_suffix=os.getenv("REMIND_ME_STATIC_HOST_SUFFIX", "github.io"),
            ),
            i18n=I18nConfig(
                default_locale=os.getenv("REMIND_ME_DEFAULT_LOCALE", "en"),
                locales_dir=os.getenv("REMIND_ME_LOCALES_DIR"),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/remind_me.log"),
        )

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """明示パス → REMIND_ME_CONFIG → デフォルトYAML → 環境変数の順で読み込む"""
        if config_path is not None:
            return cls.from_yaml(Path(config_path))
        env_path = os.getenv("REMIND_ME_CONFIG")
        if env_path:
            return cls.from_yaml(Path(env_path))
        default_path = cls.default_path()
        if default_path.exists():
            return cls.from_yaml(default_path)
        return cls.from_env()
