"""Configuration loader service."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from typed_rtdb.errors import TypedRtdbError
from typed_rtdb.schema_management.schema_loading import SchemaError, load_schema_document

from .runtime_settings import Configuration, DatabaseSettings, LoggingSettings, SchemaConfig

DEFAULT_LOG_LEVEL = "WARNING"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigurationError(TypedRtdbError):
    """Raised when the configuration file is invalid."""


def load_configuration(config_path: Path | str) -> Configuration:
    """Load and validate the configuration file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Configuration file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:  # pragma: no cover - exercised indirectly
        raise ConfigurationError(f"Failed to parse configuration file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Configuration root must be a mapping.")

    schema = _parse_schema_section(parsed.get("schema"), path.parent)
    try:
        load_schema_document(schema)
    except SchemaError as exc:
        raise ConfigurationError(str(exc)) from exc

    database = _parse_database_section(parsed.get("database"))
    logging_settings = _parse_logging_section(parsed.get("logging"))

    return Configuration(
        path=path,
        schema=schema,
        database=database,
        logging=logging_settings,
    )


def _parse_schema_section(value: Any, base_path: Path) -> SchemaConfig:
    section = _require_mapping(value, "schema")
    inline = section.get("inline")
    path_value = section.get("path")
    if inline is not None and path_value is not None:
        raise ConfigurationError("Schema section must not set both inline and path.")
    if inline is not None:
        if isinstance(inline, Mapping):
            text = yaml.safe_dump(dict(inline), sort_keys=False)
            return SchemaConfig(text=text, source_path=None)
        if not isinstance(inline, str) or not inline.strip():
            raise ConfigurationError("schema.inline must be a mapping or non-empty text.")
        return SchemaConfig(text=inline, source_path=None)
    if path_value is not None:
        raw_path = _require_non_empty_string(path_value, "schema.path")
        schema_path = _resolve_path(base_path, raw_path)
        if not schema_path.exists():
            raise ConfigurationError(f"Schema file not found: {schema_path}")
        text = schema_path.read_text(encoding="utf-8")
        if not text.strip():
            raise ConfigurationError("Schema text cannot be empty.")
        return SchemaConfig(text=text, source_path=schema_path)
    raise ConfigurationError("Schema section requires either inline or path.")


def _parse_database_section(value: Any) -> DatabaseSettings:
    if value is None:
        return DatabaseSettings(url=None)
    section = _require_mapping(value, "database")
    url = _optional_string(section.get("url"), "database.url")
    return DatabaseSettings(url=url)


def _parse_logging_section(value: Any) -> LoggingSettings:
    if value is None:
        return LoggingSettings(level=DEFAULT_LOG_LEVEL)
    section = _require_mapping(value, "logging")
    level = _require_non_empty_string(section.get("level", DEFAULT_LOG_LEVEL), "logging.level")
    level = level.upper()
    if level not in _LOG_LEVELS:
        raise ConfigurationError(
            f"logging.level must be one of {', '.join(_LOG_LEVELS)}, got {level!r}."
        )
    return LoggingSettings(level=level)


def _resolve_path(base_path: Path, raw_path: str) -> Path:
    candidate = Path(raw_path)
    if not candidate.is_absolute():
        return (base_path / candidate).resolve()
    return candidate


def _require_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Configuration section '{section_name}' is required.")
    return value


def _require_non_empty_string(value: Any, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    if not stripped:
        raise ConfigurationError(f"{field_name} must not be empty.")
    return stripped


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None
