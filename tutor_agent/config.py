"""
Configuration for the tutor agent worker.

Settings come from the process environment, optionally seeded from
``.env.local`` / ``.env`` files. They are validated once at startup; a
missing credential stops the worker before any job is accepted.
"""

import logging
import os
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_PREFIX = "TUTOR_AGENT_"

# LiveKit and OpenAI read these themselves; we only check they are present.
PROVIDER_ENV_VARS = ["LIVEKIT_URL", "LIVEKIT_API_KEY", "LIVEKIT_API_SECRET", "OPENAI_API_KEY"]


def load_environment(env_file: Optional[Path] = None) -> List[Path]:
    """Load dotenv files without overriding variables already set.

    Returns the files that were found and loaded.
    """
    candidates = [env_file] if env_file else [PROJECT_ROOT / ".env.local", PROJECT_ROOT / ".env"]
    loaded = []
    for path in candidates:
        if path.is_file():
            load_dotenv(path, override=False)
            loaded.append(path)
            logger.debug(f"Loaded environment from {path}")
    return loaded


class SupabaseSettings(BaseModel):
    """Credentials for the topic datastore."""

    url: str = Field(description="Supabase project URL")
    key: str = Field(description="Supabase API key")
    table: str = Field(default="topics", description="Table holding topic records")

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError("Supabase URL must start with http:// or https://")
        return value.rstrip("/")


class WorkerSettings(BaseModel):
    """Recognised worker options; anything else in the environment is ignored."""

    host: str = Field(default="0.0.0.0", description="Bind host for the worker HTTP server")
    port: int = Field(default=8081, ge=1, le=65535, description="Bind port for the worker HTTP server")
    agent_name: Optional[str] = Field(default=None, description="Name used for explicit dispatch")
    participant_timeout: Optional[float] = Field(
        default=None,
        gt=0,
        description="Seconds to wait for a participant; None waits forever",
    )
    realtime_model: Optional[str] = Field(default=None, description="OpenAI realtime model id")
    voice: Optional[str] = Field(default=None, description="Realtime voice")
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    tools: List[str] = Field(default_factory=list, description="Enabled tool names")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    @field_validator("tools", mode="before")
    @classmethod
    def _split_tools(cls, value):
        if isinstance(value, str):
            return [name.strip() for name in value.split(",") if name.strip()]
        return value

    @field_validator("log_level")
    @classmethod
    def _check_level(cls, value: str) -> str:
        value = value.upper()
        if value not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "text"):
            raise ValueError("log_format must be 'json' or 'text'")
        return value


class Settings(BaseModel):
    supabase: SupabaseSettings
    worker: WorkerSettings = Field(default_factory=WorkerSettings)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 require_providers: bool = True) -> "Settings":
        """Build settings from the environment.

        Raises ConfigurationError naming every missing required variable.
        """
        env = os.environ if environ is None else environ

        supabase_url = env.get("AUTH_SUPABASE_URL") or env.get("SUPABASE_URL")
        supabase_key = (
            env.get("AUTH_SUPABASE_KEY")
            or env.get("SUPABASE_SERVICE_ROLE_KEY")
            or env.get("SUPABASE_KEY")
        )

        missing = []
        if not supabase_url:
            missing.append("AUTH_SUPABASE_URL")
        if not supabase_key:
            missing.append("AUTH_SUPABASE_KEY")
        if require_providers:
            missing.extend(var for var in PROVIDER_ENV_VARS if not env.get(var))
        if missing:
            raise ConfigurationError("Missing required environment variables", missing)

        worker_fields = {}
        for name in WorkerSettings.model_fields:
            value = env.get(f"{ENV_PREFIX}{name.upper()}")
            if value not in (None, ""):
                worker_fields[name] = value

        supabase_fields = {"url": supabase_url, "key": supabase_key}
        if env.get(f"{ENV_PREFIX}TOPICS_TABLE"):
            supabase_fields["table"] = env[f"{ENV_PREFIX}TOPICS_TABLE"]

        try:
            return cls(
                supabase=SupabaseSettings(**supabase_fields),
                worker=WorkerSettings(**worker_fields),
            )
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
