"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. Explicit path (DIRECT_API_CONFIG_PATH or the ``config_path`` argument)
2. ./direct-api.yaml (working directory)
3. ~/.direct-api/config.yaml (user home)

Environment variables override YAML: DIRECT_API_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
When no file is found, the built-in defaults are used.
"""

import logging
import os
import re
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")
_ENV_PREFIX = "DIRECT_API_"

# External (lower-cased) sort field -> physical column of the challenge query.
DEFAULT_ORDER_BY_FIELDS: dict[str, str] = {
    "id": "challenge_id",
    "challengename": "challenge_name",
    "challengetype": "challenge_type",
    "clientname": "client_name",
    "clientid": "client_id",
    "billingname": "billing_name",
    "billingid": "billing_id",
    "directprojectname": "direct_project_name",
    "directprojectid": "direct_project_id",
    "challengestartdate": "challenge_start_date",
    "challengeenddate": "challenge_end_date",
    "drpoints": "dr_points",
    "challengestatus": "challenge_status",
    "challengecreator": "challenge_creator",
}


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    """Recursively resolve ${VAR} references in a nested data structure."""
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class QueryConfig(BaseModel):
    """Immutable settings shared by the filter validator and compiler.

    Built once at startup and passed to every component that needs it.
    """

    model_config = ConfigDict(frozen=True)

    order_by_fields: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_ORDER_BY_FIELDS)
    )
    default_sort_field: str = "challengeEndDate"
    id_sort_field: str = "id"
    tie_break_column: str = "challenge_id"
    date_format: str = "%m/%d/%Y"
    min_date: datetime = datetime(1970, 1, 1)
    max_date: datetime = datetime(9999, 12, 31, 23, 59, 59)
    no_match_ids: tuple[int, ...] = (-1,)
    allowed_types: tuple[str, ...] = ("active", "past", "draft")
    active_status_id: int = 1
    draft_status_id: int = 2
    past_status_category: str = "draft_project_status"
    challenge_prize_type_id: int = 15
    checkpoint_prize_type_id: int = 14
    unlimited: int = -1
    default_limit: int = 50


class ServerConfig(BaseModel):
    """Configuration for the uvicorn server process."""

    host: str = "127.0.0.1"
    port: int = 8000
    workers: int = 1


class DatabaseConfig(BaseModel):
    """Database connection configuration."""

    url: str = "sqlite:///./direct_api.db"
    echo: bool = False


class LoggingConfig(BaseModel):
    """Logging configuration applied by the application module."""

    level: str = "INFO"
    format: str = "%(levelname)s:%(name)s:%(message)s"


class AuthConfig(BaseModel):
    """Shared API key and the access levels allowed to list challenges."""

    api_key: str = ""
    allowed_levels: list[str] = ["ADMIN", "MEMBER"]


class AppConfig(BaseModel):
    """Top-level configuration for the Direct API service."""

    server: ServerConfig = ServerConfig()
    database: DatabaseConfig = DatabaseConfig()
    logging: LoggingConfig = LoggingConfig()
    auth: AuthConfig = AuthConfig()
    query: QueryConfig = QueryConfig()


def _find_config_file() -> Path | None:
    """Search for config file in standard locations."""
    candidates = [
        Path.cwd() / "direct-api.yaml",
        Path.cwd() / "direct-api.yml",
        Path.home() / ".direct-api" / "config.yaml",
        Path.home() / ".direct-api" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply DIRECT_API_<SECTION>_<KEY> env var overrides to config data.

    For example, ``DIRECT_API_DATABASE_URL`` maps to section ``database``,
    field ``url``. Only scalar fields can be overridden.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_sections = sorted(AppConfig.model_fields.keys(), key=len, reverse=True)
    for key, value in os.environ.items():
        if not key.startswith(_ENV_PREFIX):
            continue
        suffix = key[len(_ENV_PREFIX):].lower()
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        if matched_section not in data or data[matched_section] is None:
            data[matched_section] = {}
        if isinstance(data[matched_section], dict):
            # Coerce to int, bool, or keep as string
            try:
                data[matched_section][matched_field] = int(value)
            except ValueError:
                if value.lower() in ("true", "false"):
                    data[matched_section][matched_field] = value.lower() == "true"
                else:
                    data[matched_section][matched_field] = value
    return data


def load_config(config_path: str | None = None) -> AppConfig:
    """Load configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.direct-api/).

    Returns:
        Parsed and validated AppConfig. Defaults when no file is found.

    Raises:
        FileNotFoundError: If an explicit config_path does not exist.
    """
    raw_data: dict[str, Any] = {}
    if config_path:
        path: Path | None = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()

    if path is not None:
        logger.info("Loading config from %s", path)
        with open(path) as f:
            raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    return AppConfig(**data)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Return the process-wide configuration, loading it on first use."""
    return load_config(os.environ.get("DIRECT_API_CONFIG_PATH") or None)
