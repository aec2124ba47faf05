"""クライアント設定（pydantic BaseModel）と YAML 読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .models import Auth

DEFAULT_BASE_URL = "https://api.flags.gg"
DEFAULT_MAX_RETRIES = 3
MAX_RETRIES_LIMIT = 10


class ClientConfig(BaseModel):
    """FlagsClient の設定。"""

    base_url: str = DEFAULT_BASE_URL
    max_retries: int = Field(default=DEFAULT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=0.1, ge=0.0)
    timeout: float = Field(default=10.0, gt=0.0)
    auth: Auth | None = None

    @field_validator("base_url")
    @classmethod
    def _check_base_url(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Base URL cannot be empty")
        return v

    @field_validator("max_retries")
    @classmethod
    def _check_max_retries(cls, v: int) -> int:
        if v > MAX_RETRIES_LIMIT:
            raise ValueError(f"Max retries cannot exceed {MAX_RETRIES_LIMIT}")
        return v

    @field_validator("auth")
    @classmethod
    def _check_auth(cls, v: Auth | None) -> Auth | None:
        if v is None:
            return v
        if not v.project_id.strip():
            raise ValueError("Project ID cannot be empty")
        if not v.agent_id.strip():
            raise ValueError("Agent ID cannot be empty")
        if not v.environment_id.strip():
            raise ValueError("Environment ID cannot be empty")
        return v


def validate_config(data: dict[str, Any]) -> ClientConfig:
    """dict を検証して ClientConfig を返す。"""
    try:
        return ClientConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Config validation failed: {e}", cause=e) from e


def load_config(path: Path) -> ClientConfig:
    """YAML 設定ファイルを読み込んで ClientConfig を返す。"""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to read config file: {path}", cause=e) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML: {path}", cause=e) from e
    return validate_config(data)
