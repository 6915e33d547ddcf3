"""Runtime settings for the ledger.

Values come from, in increasing priority: field defaults, the YAML file
named by CLIPSCORE_CONFIG (or config/clipscore.yaml at the project root),
and CLIPSCORE_* environment variables (nested with a double underscore,
e.g. CLIPSCORE_DATABASE__PATH).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml
from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SENSITIVE_KEYS = ("password", "token", "secret")


def _project_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _data_dir(test_mode: bool = False) -> str:
    base = _project_root() / "data"
    return str(base / "test" if test_mode else base)


class DatabaseSettings(BaseModel):
    url: str | None = None
    filename: str = "clipscore.db"
    path: str | None = None
    echo: bool = False

    def database_path(self, test_mode: bool = False) -> str:
        """Return the full path to the SQLite database file."""
        if self.path:
            return os.path.abspath(self.path)
        data_dir = _data_dir(test_mode)
        os.makedirs(data_dir, exist_ok=True)
        return os.path.join(data_dir, self.filename)


class LoggingSettings(BaseModel):
    json_logs: bool = True
    level: str = "INFO"
    events_dir: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _alias_json(cls, data: Any) -> Any:
        if isinstance(data, dict) and "json" in data and "json_logs" not in data:
            data = dict(data)
            data["json_logs"] = data.pop("json")
        return data


class LedgerSettings(BaseModel):
    initial_clips: int = Field(default=100, ge=0, description="Balance given to newly created users.")
    leaderboard_limit: int = Field(default=50, ge=1, le=1000)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CLIPSCORE_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    test_mode: bool = False
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)


_last_yaml_path: str | None = None


def last_yaml_path() -> str | None:
    """Path of the YAML file used by the most recent load_settings() call."""
    return _last_yaml_path


def _yaml_candidates(explicit: str | None) -> list[Path]:
    candidates: list[Path] = []
    if explicit:
        candidates.append(Path(explicit))
    env_path = os.getenv("CLIPSCORE_CONFIG")
    if env_path:
        candidates.append(Path(env_path))
    candidates.append(_project_root() / "config" / "clipscore.yaml")
    return candidates


def _load_yaml(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config file {path} must contain a mapping")
    return data


def load_settings(yaml_path: str | None = None, **overrides: Any) -> Settings:
    """Build Settings from YAML (if present), the environment, and overrides."""
    global _last_yaml_path
    file_values: Dict[str, Any] = {}
    for path in _yaml_candidates(yaml_path):
        if path.exists():
            file_values = _load_yaml(path)
            _last_yaml_path = str(path.resolve())
            break
    # Environment wins over the file: only pass file keys the env does not set.
    env_keys = {k[len("CLIPSCORE_"):].split("__")[0].lower() for k in os.environ if k.startswith("CLIPSCORE_")}
    init_values = {k: v for k, v in file_values.items() if k not in env_keys}
    init_values.update(overrides)
    return Settings(**init_values)


def sanitize_dict(data: Mapping[str, Any]) -> Dict[str, Any]:
    """Copy of a settings mapping with secrets masked, for logging."""
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, Mapping):
            out[key] = sanitize_dict(value)
        elif any(s in str(key).lower() for s in _SENSITIVE_KEYS) and value:
            out[key] = "***"
        else:
            out[key] = value
    return out


__all__ = [
    "DatabaseSettings",
    "LoggingSettings",
    "LedgerSettings",
    "Settings",
    "load_settings",
    "last_yaml_path",
    "sanitize_dict",
    "_project_root",
    "_data_dir",
]
