"""Configuration domain entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class SchemaConfig:
    """Normalized schema declaration settings."""

    text: str
    source_path: Path | None


@dataclass(frozen=True)
class DatabaseSettings:
    """Location of the database the schema describes."""

    url: str | None


@dataclass(frozen=True)
class LoggingSettings:
    """Logging setup applied by the command line interface."""

    level: str


@dataclass(frozen=True)
class Configuration:
    """Top-level configuration aggregate."""

    path: Path
    schema: SchemaConfig
    database: DatabaseSettings
    logging: LoggingSettings
