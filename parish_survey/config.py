"""Configuration utilities for the Parish Survey service.

This module loads application configuration with the following rules:
- Primary source: `survey_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_SURVEY_CONFIG = Path("survey_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class SinkConfig(BaseModel):
    backend: str = "sql"  # one of: sql, rest
    database_url: str = "sqlite+pysqlite:///:memory:"
    rest_url: Optional[str] = None
    api_key: Optional[str] = None
    table: str = "survey_responses"
    timeout_seconds: float = Field(default=10.0, gt=0)

    @field_validator("backend")
    @classmethod
    def backend_must_be_allowed(cls, v: str) -> str:
        allowed = {"sql", "rest"}
        if v not in allowed:
            raise ValueError(f"sink.backend must be one of {sorted(allowed)}")
        return v

    @field_validator("database_url", "table")
    @classmethod
    def must_be_non_empty(cls, v: str) -> str:
        if not isinstance(v, str) or not v.strip():
            raise ValueError("value must be a non-empty string")
        return v

    @property
    def rest_ready(self) -> bool:
        return bool((self.rest_url or "").strip() and (self.api_key or "").strip())


class DraftConfig(BaseModel):
    backend: str = "memory"  # one of: memory, sql
    storage_key: str = "ht_survey_data"
    page_key: str = "ht_survey_page"
    # Live sessions kept in memory; older ones are restored from the draft
    max_sessions: int = Field(default=1000, gt=0)

    @field_validator("backend")
    @classmethod
    def backend_must_be_allowed(cls, v: str) -> str:
        allowed = {"memory", "sql"}
        if v not in allowed:
            raise ValueError(f"draft.backend must be one of {sorted(allowed)}")
        return v


class ViewerConfig(BaseModel):
    new_badge_hours: int = Field(default=24, gt=0)


class AppConfig(BaseModel):
    sink: SinkConfig = Field(default_factory=SinkConfig)
    draft: DraftConfig = Field(default_factory=DraftConfig)
    viewer: ViewerConfig = Field(default_factory=ViewerConfig)
    # Origins allowed to call the API from a browser; "*" admits any
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @property
    def uses_sql(self) -> bool:
        return self.sink.backend == "sql" or self.draft.backend == "sql"


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            data = json.loads(path.read_text(encoding="utf-8"))
            return data if isinstance(data, dict) else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) survey_config.json at project root (primary base)
    4) Safe defaults for development
    """

    base = _read_json_file(ROOT_SURVEY_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    # Sink
    sink_backend = (_env("SURVEY_SINK_BACKEND") or _read_config_file("sink.backend") or _base("sink.backend", "sql")).strip()
    database_url = _env("DATABASE_URL") or _read_config_file("database.url") or _base("sink.database_url") or "sqlite+pysqlite:///:memory:"
    rest_url = _env("SURVEY_REST_URL") or _read_config_file("sink.rest_url") or _base("sink.rest_url")
    api_key = _env("SURVEY_API_KEY") or _read_config_file("sink.api_key") or _base("sink.api_key")
    table = _env("SURVEY_TABLE") or _read_config_file("sink.table") or _base("sink.table", "survey_responses")
    timeout_text = _env("SURVEY_SINK_TIMEOUT") or _read_config_file("sink.timeout_seconds") or _base("sink.timeout_seconds", "10")

    # Drafts
    draft_backend = (_env("SURVEY_DRAFT_BACKEND") or _read_config_file("draft.backend") or _base("draft.backend", "memory")).strip()
    storage_key = _env("SURVEY_DRAFT_KEY") or _base("draft.storage_key", "ht_survey_data")
    page_key = _env("SURVEY_DRAFT_PAGE_KEY") or _base("draft.page_key", "ht_survey_page")
    max_sessions_text = _env("SURVEY_MAX_SESSIONS") or _read_config_file("draft.max_sessions") or _base("draft.max_sessions", "1000")

    # Viewer
    badge_hours_text = _env("SURVEY_NEW_BADGE_HOURS") or _read_config_file("viewer.new_badge_hours") or _base("viewer.new_badge_hours", "24")

    # CORS
    # survey_config.json may give a list; env and text files give a comma list
    origins_raw = _env("SURVEY_CORS_ORIGINS") or _read_config_file("cors.origins") or base.get("cors_origins") or "*"
    origins = origins_raw if isinstance(origins_raw, list) else str(origins_raw).split(",")
    cors_origins = [str(o).strip() for o in origins if str(o).strip()] or ["*"]

    try:
        cfg = AppConfig(
            sink=SinkConfig(
                backend=sink_backend,
                database_url=database_url,
                rest_url=rest_url,
                api_key=api_key,
                table=table,
                timeout_seconds=float(str(timeout_text).strip()),
            ),
            draft=DraftConfig(
                backend=draft_backend,
                storage_key=storage_key,
                page_key=page_key,
                max_sessions=int(str(max_sessions_text).strip()),
            ),
            viewer=ViewerConfig(new_badge_hours=int(str(badge_hours_text).strip())),
            cors_origins=cors_origins,
        )
        return cfg
    except (PydanticValidationError, ValueError) as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "SinkConfig",
    "DraftConfig",
    "ViewerConfig",
    "load_config",
]
