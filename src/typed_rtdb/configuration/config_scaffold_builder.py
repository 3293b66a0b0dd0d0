"""Configuration scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "typed-rtdb.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Configuration template for typed-rtdb.
# Replace every <REQUIRED> placeholder before running show-config, resolve, children,
# validate or query.
# Replace <OPTIONAL> placeholders only when your setup needs them.

schema:
  # Provide exactly one of inline or path.
  # Leaf types: string, number, boolean, null. A "?" suffix marks an optional field.
  # "*" declares arbitrary keys sharing one shape, "[]" declares a numeric-indexed array.
  inline:
    users:
      "*":
        name: "<REQUIRED>"
        score: "<REQUIRED>"
  # path: "<OPTIONAL>"

database:
  url: "<OPTIONAL>"

logging:
  # One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
  level: "WARNING"
"""


def build_placeholder_configuration() -> str:
    """Build a YAML configuration template with placeholders and inline guidance."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_configuration(output_path: Path | str) -> Path:
    """Write the placeholder configuration template to the requested output path.

    Args:
      output_path: Destination file path for the scaffold.

    Returns:
      The resolved destination path.

    Raises:
      FileExistsError: If the destination file already exists.
      OSError: If writing the scaffold fails.
    """
    destination = Path(output_path)
    if destination.exists():
        raise FileExistsError(f"Configuration file already exists: {destination.resolve()}")
    destination.write_text(build_placeholder_configuration(), encoding="utf-8")
    return destination.resolve()
