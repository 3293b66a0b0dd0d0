"""Command line interface entry point."""

from __future__ import annotations

import json
import logging
import sys
from typing import Any

import click

from typed_rtdb.configuration import (
    DEFAULT_CONFIG_FILENAME,
    ConfigurationError,
    load_configuration,
    write_placeholder_configuration,
)
from typed_rtdb.errors import TypedRtdbError
from typed_rtdb.path_algebra import valid_child_patterns
from typed_rtdb.queries import ConstraintType, Query
from typed_rtdb.references import Reference, TypedDatabase
from typed_rtdb.schema_management import SchemaError, describe_shape, load_schema_document

logger = logging.getLogger(__name__)

_CONFIG_OPTION = click.option(
    "--config",
    "config_path",
    required=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration file",
)


class CliError(Exception):
    """Custom CLI error."""


class _DescribingConstraintFactory:  # pylint: disable=too-few-public-methods
    """Renders compiled constraints as call expressions."""

    def build_constraint(self, constraint_type: str, *arguments: Any) -> str:
        rendered = ", ".join(json.dumps(argument) for argument in arguments)
        return f"{constraint_type}({rendered})"


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="typed-rtdb")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override the logging level from the configuration file",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """Schema-aware path and query checks for hierarchical databases."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None


@cli.command(name="generate-config")
@click.option(
    "--output",
    "output_path",
    required=False,
    default=DEFAULT_CONFIG_FILENAME,
    show_default=True,
    type=click.Path(path_type=str),
    help="Path to the YAML configuration template to write",
)
def generate_config(output_path: str) -> None:
    """Generate a placeholder YAML configuration with guidance comments."""
    try:
        resolved_output = write_placeholder_configuration(output_path)
    except (FileExistsError, OSError) as exc:
        raise CliError(str(exc)) from exc
    click.echo(str(resolved_output))


@cli.command(name="show-config")
@_CONFIG_OPTION
def show_config(config_path: str) -> None:
    """Validate the configuration file and print its effective settings."""
    try:
        configuration = load_configuration(config_path)
    except (ConfigurationError, OSError) as exc:
        raise CliError(str(exc)) from exc
    schema_source = configuration.schema.source_path or "inline"
    click.echo(f"schema: {schema_source}")
    click.echo(f"database.url: {configuration.database.url or '<not set>'}")
    click.echo(f"logging.level: {configuration.logging.level}")


@cli.command(name="resolve")
@_CONFIG_OPTION
@click.argument("path")
@click.pass_context
def resolve_path(ctx: click.Context, config_path: str, path: str) -> None:
    """Print the shape stored at PATH."""
    reference = _reference(ctx, config_path, path)
    click.echo(describe_shape(reference.shape))


@cli.command(name="children")
@_CONFIG_OPTION
@click.argument("path", default="")
@click.pass_context
def list_children(ctx: click.Context, config_path: str, path: str) -> None:
    """List the child path patterns accepted below PATH."""
    reference = _reference(ctx, config_path, path)
    for pattern in sorted(valid_child_patterns(reference.shape)):
        click.echo(pattern)


@cli.command(name="validate")
@_CONFIG_OPTION
@click.argument("path")
@click.option("--value", "raw_value", required=True, help="JSON value to check")
@click.option(
    "--mode",
    type=click.Choice(["set", "update", "push"]),
    default="set",
    show_default=True,
    help="Write operation the value is intended for",
)
@click.pass_context
def validate_value(
    ctx: click.Context, config_path: str, path: str, raw_value: str, mode: str
) -> None:
    """Check that a JSON value may be written at PATH."""
    reference = _reference(ctx, config_path, path)
    value = _parse_json(raw_value, "--value")
    try:
        if mode == "set":
            reference.check_set(value)
        elif mode == "update":
            reference.check_update(value)
        else:
            reference.check_push(value)
    except TypedRtdbError as exc:
        raise CliError(str(exc)) from exc
    click.echo("ok")


@cli.command(name="query")
@_CONFIG_OPTION
@click.argument("path")
@click.option(
    "--constraint",
    "constraints",
    multiple=True,
    help="Constraint as NAME or NAME=ARG, applied in the given order (e.g. orderByChild=score)",
)
@click.pass_context
def build_query(
    ctx: click.Context, config_path: str, path: str, constraints: tuple[str, ...]
) -> None:
    """Build a query at PATH and print its compiled constraints in order."""
    query = _reference(ctx, config_path, path).query()
    try:
        for raw_constraint in constraints:
            query = _apply_constraint(query, raw_constraint)
    except TypedRtdbError as exc:
        raise CliError(str(exc)) from exc
    for compiled in query.compile(_DescribingConstraintFactory()):
        click.echo(compiled)


def _reference(ctx: click.Context, config_path: str, path: str) -> Reference:
    try:
        configuration = load_configuration(config_path)
        document = load_schema_document(configuration.schema)
    except (ConfigurationError, SchemaError, OSError) as exc:
        raise CliError(str(exc)) from exc
    level = (ctx.obj or {}).get("log_level") or configuration.logging.level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    logger.debug("Loaded schema from %s", document.source_path or configuration.path)
    try:
        return TypedDatabase(schema=document.root).ref(path)
    except TypedRtdbError as exc:
        raise CliError(str(exc)) from exc


def _apply_constraint(query: Query, raw_constraint: str) -> Query:
    name, _, raw_argument = raw_constraint.partition("=")
    try:
        constraint_type = ConstraintType(name.strip())
    except ValueError as exc:
        raise CliError(f"Unknown constraint: {name!r}") from exc
    if constraint_type is ConstraintType.ORDER_BY_CHILD:
        return query.order_by_child(raw_argument)
    if constraint_type.is_ordering:
        return {
            ConstraintType.ORDER_BY_KEY: query.order_by_key,
            ConstraintType.ORDER_BY_VALUE: query.order_by_value,
            ConstraintType.ORDER_BY_PRIORITY: query.order_by_priority,
        }[constraint_type]()
    argument = _parse_json(raw_argument, name)
    if constraint_type is ConstraintType.LIMIT_TO_FIRST:
        return query.limit_to_first(argument)
    if constraint_type is ConstraintType.LIMIT_TO_LAST:
        return query.limit_to_last(argument)
    range_methods = {
        ConstraintType.START_AT: query.start_at,
        ConstraintType.START_AFTER: query.start_after,
        ConstraintType.END_AT: query.end_at,
        ConstraintType.END_BEFORE: query.end_before,
        ConstraintType.EQUAL_TO: query.equal_to,
    }
    if isinstance(argument, list) and len(argument) == 2:
        return range_methods[constraint_type](argument[0], argument[1])
    return range_methods[constraint_type](argument)


def _parse_json(raw: str, label: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise CliError(f"{label} must be valid JSON: {exc}") from exc


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for console_scripts wiring."""
    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=list(argv), standalone_mode=False)
    except CliError as exc:
        click.echo(str(exc), err=True)
        return 1
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except click.Abort:
        click.echo("Aborted.", err=True)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
