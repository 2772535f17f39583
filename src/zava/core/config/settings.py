from __future__ import annotations

"""Chat settings loaded from an appsettings document and the environment."""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

DEFAULT_MODEL_NAME = "Phi-4"
SETTINGS_SECTION = "ChatSettings"

_ENV_OVERRIDES = {
    "endpoint_url": "ZAVA_CHAT_ENDPOINT_URL",
    "api_key": "ZAVA_CHAT_API_KEY",
    "model_name": "ZAVA_CHAT_MODEL_NAME",
}


class SettingsError(RuntimeError):
    pass


class ChatSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, protected_namespaces=())

    endpoint_url: str = Field("", alias="EndpointUrl")
    api_key: str = Field("", alias="ApiKey")
    model_name: str = Field(DEFAULT_MODEL_NAME, alias="ModelName")

    @field_validator("endpoint_url", "api_key", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint_url.strip())

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key.strip())


def _default_path() -> Path:
    return Path(os.getenv("ZAVA_APPSETTINGS_PATH", "appsettings.json"))


def _read_section(cfg_path: Path) -> dict[str, Any]:
    if not cfg_path.exists():
        return {}
    try:
        with cfg_path.open("r", encoding="utf-8-sig") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise SettingsError(f"Could not parse settings file {cfg_path}") from exc
    if not isinstance(data, dict):
        raise SettingsError(f"Settings file {cfg_path} must contain a mapping")
    section = data.get(SETTINGS_SECTION) or {}
    if not isinstance(section, dict):
        raise SettingsError(f"{SETTINGS_SECTION} in {cfg_path} must be a mapping")
    return section


def load_chat_settings(path: Optional[str | Path] = None) -> ChatSettings:
    """Load chat settings from an appsettings file, then apply environment overrides.

    The file is parsed with YAML, so plain ``appsettings.json`` documents are
    accepted as they are. A missing file yields the defaults; validation of the
    endpoint is left to call time.
    """
    cfg_path = Path(path) if path else _default_path()
    values = dict(_read_section(cfg_path))
    for field_name, env_name in _ENV_OVERRIDES.items():
        override = os.getenv(env_name)
        if override is not None:
            values.pop(ChatSettings.model_fields[field_name].alias, None)
            values[field_name] = override
    try:
        return ChatSettings.model_validate(values)
    except ValidationError as exc:
        raise SettingsError(f"Invalid {SETTINGS_SECTION} in {cfg_path}") from exc
