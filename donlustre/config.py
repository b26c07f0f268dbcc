"""Application configuration loaded from config.yaml + environment variables."""

from __future__ import annotations

import os

import yaml
from pathlib import Path
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"


def _load_yaml() -> dict:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            return yaml.safe_load(f) or {}
    return {}


_yaml = _load_yaml()


class StorageConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    bucket: str = "receipts"
    base_dir: str = "data/storage"
    public_base_url: str = "/storage"
    auto_create_bucket: bool = True


class ReceiptConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="RECEIPT_")

    tax_rate: float = 0.085
    currency: str = "$"
    business_name: str = "Don Lustre"
    business_tagline: str = "Shoe & Dry Cleaning Delivery"
    logo_path: str = ""
    watermark_opacity: float = 0.08
    footer_text: str = "Thank you for trusting us with your garments and shoes."


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///data/donlustre.db"
    store_key: str = ""
    log_level: str = "INFO"
    session_cookie_name: str = "admin_session"
    storage: StorageConfig = Field(default_factory=StorageConfig)
    receipts: ReceiptConfig = Field(default_factory=ReceiptConfig)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


def get_settings() -> Settings:
    """Build Settings by merging YAML defaults with env overrides.

    YAML supplies defaults; any field also set in the environment wins.
    """
    y = _yaml
    storage = StorageConfig(**_without_env(StorageConfig, y.get("storage", {})))
    receipts = ReceiptConfig(**_without_env(ReceiptConfig, y.get("receipts", {})))
    top = {k: v for k, v in y.items() if k not in ("storage", "receipts")}
    db = y.get("database", {})
    if "url" in db:
        top["database_url"] = db["url"]
    top.pop("database", None)
    return Settings(
        storage=storage,
        receipts=receipts,
        **_without_env(Settings, top),
    )


def _without_env(model: type[BaseSettings], values: dict) -> dict:
    """Drop YAML values whose field is overridden by an environment variable."""
    prefix = model.model_config.get("env_prefix", "")
    return {
        k: v for k, v in values.items()
        if k in model.model_fields and f"{prefix}{k}".upper() not in os.environ
    }
