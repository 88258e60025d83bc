"""Configuration loader for parcelscope using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags (where applicable)
  2. Environment variables (PARCELSCOPE_* with __ for nesting)
  3. Plain PORT / AUTH_TOKEN environment variables
  4. settings.local.toml
  5. settings.{env}.toml
  6. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("PARCELSCOPE_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "PARCELSCOPE_ENV"
DEFAULT_ENV = "local"

DESKTOP_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0.0.0 Safari/537.36"
)

# Un-prefixed variables honoured for deployment compatibility: (section, field) -> env var.
_PLAIN_ENV_VARS: dict[tuple[str, str], str] = {
    ("api", "port"): "PORT",
    ("api", "auth_token"): "AUTH_TOKEN",
}


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _plain_env_layer() -> dict[str, Any]:
    layer: dict[str, Any] = {}
    for (section, key), var in _PLAIN_ENV_VARS.items():
        value = os.getenv(var)
        if value:
            layer.setdefault(section, {})[key] = value
    return layer


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class BrowserSettings(BaseSettings):
    """Playwright browser settings."""

    model_config = SettingsConfigDict(env_prefix="PARCELSCOPE_BROWSER__")

    headless: bool = True
    user_agent: str = DESKTOP_USER_AGENT
    viewport_width: int = 1366
    viewport_height: int = 900
    navigation_timeout_ms: int = Field(default=60_000, ge=0)
    wait_until: str = Field(default="domcontentloaded", pattern="^(commit|domcontentloaded|load|networkidle)$")
    sandbox: bool = False
    apply_stealth_scripts: bool = True
    proxy: str = ""


class TargetSettings(BaseSettings):
    """Tracking site the scraper drives."""

    model_config = SettingsConfigDict(env_prefix="PARCELSCOPE_TARGET__")

    tracking_url_template: str = "https://parcelsapp.com/en/tracking/{tracking_number}"
    api_url_prefix: str = "https://parcelsapp.com/api/v2/parcels"
    default_timeout_ms: int = Field(default=30_000, ge=0)


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="PARCELSCOPE_API__")

    host: str = "0.0.0.0"
    port: int = 3000
    auth_token: str = ""
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root parcelscope settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="PARCELSCOPE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)
    debug: bool = False
    log_level: str = "INFO"

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    target: TargetSettings = Field(default_factory=TargetSettings)
    api: APISettings = Field(default_factory=APISettings)

    @model_validator(mode="before")
    @classmethod
    def _merge_config_layers(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files and plain env vars before namespaced env overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < PORT/AUTH_TOKEN < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, _plain_env_layer(), values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged

    @property
    def auth_enabled(self) -> bool:
        """True when the scrape endpoint compares bearer tokens against a configured secret."""
        return bool(self.api.auth_token)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
