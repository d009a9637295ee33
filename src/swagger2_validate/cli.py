"""CLI entry point for swagger2-validate."""

import json
import logging
from pathlib import Path
from typing import Any

import click

from swagger2_validate.config import Settings
from swagger2_validate.document.loader import load_document
from swagger2_validate.document.meta import document_errors
from swagger2_validate.engine.compiler import CompiledDocument, compile_document
from swagger2_validate.engine.validator import validate_request, validate_response
from swagger2_validate.errors import DocumentLoadError

EXIT_INVALID = 1
EXIT_UNROUTABLE = 2


def _compile(doc_path: Path, settings: Settings) -> CompiledDocument:
    """Load and compile a document, reporting load failures as CLI errors."""
    try:
        document = load_document(doc_path)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e
    return compile_document(document, settings)


def _pairs(values: tuple[str, ...], label: str) -> dict[str, Any]:
    """Turn repeated name=value options into a map; repeated names become lists."""
    result: dict[str, Any] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep:
            raise click.BadParameter(f"expected name=value, got {item!r}", param_hint=label)
        if name in result:
            existing = result[name]
            result[name] = [*existing, value] if isinstance(existing, list) else [existing, value]
        else:
            result[name] = value
    return result


def _body(text: str | None) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError as e:
        raise click.BadParameter(f"not valid JSON ({e})", param_hint="--body") from e


@click.group()
@click.option(
    "--log-level",
    default="WARNING",
    envvar="SWAGGER2_LOG_LEVEL",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging verbosity.",
)
@click.option(
    "--check-formats/--no-check-formats",
    default=True,
    envvar="SWAGGER2_CHECK_FORMATS",
    help="Enforce `format` keywords (date-time, email, ...).",
)
@click.pass_context
def main(ctx: click.Context, log_level: str, check_formats: bool):
    """swagger2-validate: route and validate traffic against a Swagger 2.0 document."""
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = Settings(log_level=log_level.upper(), check_formats=check_formats)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
def check(doc_path: Path):
    """Check that a document is a valid Swagger 2.0 description."""
    try:
        document = load_document(doc_path)
    except DocumentLoadError as e:
        raise click.ClickException(str(e)) from e

    errors = document_errors(document)
    if errors:
        for message in errors:
            click.echo(message, err=True)
        raise SystemExit(EXIT_INVALID)
    click.echo("OK")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.pass_obj
def routes(settings: Settings, doc_path: Path):
    """List the path templates a document routes, with their methods."""
    compiled = _compile(doc_path, settings)
    for compiled_path in compiled.paths:
        methods = " ".join(method.upper() for method in compiled_path.operations)
        click.echo(f"{compiled.base_path}{compiled_path.name}\t{methods}")


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("method")
@click.argument("path")
@click.option("-q", "--query", multiple=True, help="Query parameter as name=value (repeatable).")
@click.option("-H", "--header", multiple=True, help="Header as name=value (repeatable).")
@click.option("--body", default=None, help="Request body as JSON.")
@click.pass_obj
def request(settings: Settings, doc_path: Path, method: str, path: str, query, header, body: str | None):
    """Validate a request against the document."""
    compiled = _compile(doc_path, settings)
    compiled_path = compiled(path)
    if compiled_path is None:
        click.echo(f"404: no route for {path}", err=True)
        raise SystemExit(EXIT_UNROUTABLE)

    errors = validate_request(
        compiled_path,
        method,
        query=_pairs(query, "--query"),
        body=_body(body),
        headers=_pairs(header, "--header"),
    )
    if errors is None:
        click.echo(f"405: {method.upper()} not allowed on {compiled_path.name}", err=True)
        raise SystemExit(EXIT_UNROUTABLE)

    click.echo(json.dumps([error.to_dict() for error in errors], indent=2, default=str))
    if errors:
        raise SystemExit(EXIT_INVALID)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.argument("method")
@click.argument("path")
@click.argument("status", type=int)
@click.option("--body", default=None, help="Response body as JSON.")
@click.pass_obj
def response(settings: Settings, doc_path: Path, method: str, path: str, status: int, body: str | None):
    """Validate a response body against the document."""
    compiled = _compile(doc_path, settings)
    error = validate_response(compiled(path), method, status, _body(body))
    if error is None:
        click.echo("OK")
        return

    click.echo(json.dumps(error.to_dict(), indent=2, default=str))
    raise SystemExit(EXIT_INVALID)
