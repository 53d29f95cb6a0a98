"""Command-line interface for EntityLens.

Every command reads a JSON catalog declaration and JSON record files, and
prints its result on stdout. Logs go to stderr.
"""

import json
import uuid
from typing import Any, NoReturn

import click
from pydantic import ValidationError

from entitylens.core.config import get_settings
from entitylens.core.logging import (
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)
from entitylens.domain.entities.audit_message import AuditAction
from entitylens.domain.entities.record_snapshot import RecordSnapshot
from entitylens.domain.exceptions import EntityLensError
from entitylens.domain.services import AuditDiffService, ParameterSubstitution, QueryBuilder
from entitylens.infrastructure.metadata import CatalogConfig, InMemoryMetadataCatalog

logger = get_logger(__name__)


def _read_json(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{path} is not valid JSON: {e}") from e


def _load_catalog(path: str) -> tuple[InMemoryMetadataCatalog, CatalogConfig]:
    try:
        config = CatalogConfig.model_validate(_read_json(path))
    except ValidationError as e:
        raise click.ClickException(f"Invalid catalog {path}:\n{e}") from e
    if not config.entities:
        raise click.ClickException(f"Catalog {path} declares no record types")

    catalog = InMemoryMetadataCatalog()
    try:
        catalog.load_config(config)
    except (ImportError, AttributeError, ValueError) as e:
        raise click.ClickException(f"Unable to load catalog {path}: {e}") from e
    return catalog, config


def _load_record(path: str, entity_type: str) -> RecordSnapshot:
    data = _read_json(path)
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object")
    return RecordSnapshot(entity_type, data)


def _type_name(config: CatalogConfig, entity_type: str | None) -> str:
    # Without --type the first declared record type is used
    return entity_type or config.entities[0].name


type_option = click.option(
    "--type",
    "entity_type",
    type=str,
    default=None,
    help="Record type declared in the catalog (defaults to the first one)",
)


@click.group()
@click.version_option(version=get_settings().app_version, prog_name="EntityLens")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides ENTITYLENS_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str | None) -> None:
    """EntityLens - audit diffs and queries by example for records.

    Catalogs declare record types and their fields; records are JSON objects.
    """
    settings = get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)

    # One correlation id per invocation; the command name stays bound until it exits
    clear_context()
    bind_correlation_id(f"cid_{uuid.uuid4().hex[:12]}")
    ctx.with_resource(LoggingContext(command=ctx.invoked_subcommand or ""))


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False), required=False)
@type_option
@click.option(
    "--action",
    type=click.Choice([a.value for a in AuditAction]),
    default=AuditAction.UPDATE.value,
    show_default=True,
    help="Operation to describe. create and delete only read OLD.",
)
def audit(catalog: str, old: str, new: str | None, entity_type: str | None, action: str) -> None:
    """Print the audit message for a record change."""
    lens, config = _load_catalog(catalog)
    name = _type_name(config, entity_type)
    service = AuditDiffService(lens)
    before = _load_record(old, name)

    with LoggingContext(entity_type=name):
        try:
            if action == AuditAction.CREATE.value:
                message = service.build_create_message(before)
            elif action == AuditAction.DELETE.value:
                message = service.build_delete_message(before)
            else:
                if new is None:
                    raise click.UsageError("NEW is required for update messages")
                message = service.build_update_message(before, _load_record(new, name))
        except EntityLensError as e:
            raise click.ClickException(str(e)) from e

        logger.info("Built audit message", action=action, empty=not message)
    click.echo(str(message))


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
@type_option
def changed(catalog: str, old: str, new: str, entity_type: str | None) -> None:
    """Print the names of synchronizable fields that differ, one per line."""
    lens, config = _load_catalog(catalog)
    name = _type_name(config, entity_type)
    with LoggingContext(entity_type=name):
        try:
            fields = AuditDiffService(lens).get_updated_fields(
                _load_record(old, name), _load_record(new, name)
            )
        except EntityLensError as e:
            raise click.ClickException(str(e)) from e
        logger.info("Compared records", changed=len(fields))
    for field in fields:
        click.echo(field)


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("example", type=click.Path(exists=True, dir_okay=False))
@type_option
@click.option("--exact", is_flag=True, default=False, help="Compare text with = instead of LIKE")
@click.option("--alias", type=str, default=None, help="Column alias (overrides ENTITYLENS_QUERY_ALIAS)")
def query(catalog: str, example: str, entity_type: str | None, exact: bool, alias: str | None) -> None:
    """Print the where clause built from an example record."""
    lens, config = _load_catalog(catalog)
    name = _type_name(config, entity_type)
    builder = QueryBuilder(lens, alias=alias) if alias else QueryBuilder(lens)
    with LoggingContext(entity_type=name):
        try:
            clause = builder.build_query_clause(_load_record(example, name), exact_match=exact)
        except EntityLensError as e:
            raise click.ClickException(str(e)) from e
        logger.info("Built query clause", exact=exact, empty=not clause)
    click.echo(clause)


@cli.command()
@click.argument("catalog", type=click.Path(exists=True, dir_okay=False))
@click.argument("record", type=click.Path(exists=True, dir_okay=False))
@type_option
def params(catalog: str, record: str, entity_type: str | None) -> None:
    """Print URL parameters built from a record's persistent fields."""
    lens, config = _load_catalog(catalog)
    name = _type_name(config, entity_type)
    with LoggingContext(entity_type=name):
        try:
            parameters = QueryBuilder(lens).build_url_parameters(_load_record(record, name))
        except EntityLensError as e:
            raise click.ClickException(str(e)) from e
    click.echo(parameters)


@cli.command()
@click.argument("template", type=str)
@click.argument("record", type=click.Path(exists=True, dir_okay=False))
def substitute(template: str, record: str) -> None:
    """Replace :name tokens in TEMPLATE with literals read from RECORD."""
    click.echo(ParameterSubstitution().replace_parameters(template, _load_record(record, "record")))


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `entitylens` command is run
    or when using `python -m entitylens`.
    """
    cli()


if __name__ == "__main__":
    main()
