"""Command line interface for attribute value verification."""

import logging
from pathlib import Path
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import VerifyConfig
from .context import VerifyEnvironment
from .errors import ConfigError
from .models import AttributeValue, BatchRequest, ManagerCommand, Operator, ParentObject
from .report import ReportTimer, generate_report
from .validator import VerificationResult, VerifyEngine

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="attrverify",
    help="Verify batch request attribute values.",
    add_completion=False,
    rich_markup_mode="rich",
)

console = Console()

VALID_FORMATS = ["text", "json", "markdown"]


def version_callback(value: bool) -> None:
    """Show version information and exit."""
    if value:
        console.print(f"attrverify version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-V", callback=version_callback, help="Show version and exit")
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging")
    ] = False,
) -> None:
    """attrverify - check attribute values before a batch request is accepted."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_assignment(text: str, op: Operator = Operator.SET) -> AttributeValue:
    """
    Parse ``name[.resource]=value`` into an AttributeValue.

    Raises:
        typer.BadParameter: If there is no ``=``.
    """
    target, sep, value = text.partition("=")
    if not sep or not target:
        raise typer.BadParameter(f"expected NAME[.RESOURCE]=VALUE, got '{text}'")
    name, dot, resource = target.partition(".")
    return AttributeValue(name=name, value=value, resource=resource if dot else None, op=op)


def _load_environment(config: Optional[Path]) -> VerifyEnvironment:
    try:
        if config is None:
            return VerifyEnvironment.from_config(VerifyConfig())
        return VerifyEnvironment.from_config(VerifyConfig.from_file(config))
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)


def _emit(result: VerificationResult, duration_ms: int, format: str, source: Optional[Path] = None) -> None:
    if format == "text":
        color = "green" if result.valid else "red"
        console.print(f"[{color}]{escape(result.summary())}[/{color}]")
        for attr in result.attributes:
            if attr.qualified_name in result.rewritten:
                console.print(escape(f"  {attr.qualified_name} = {attr.value}"))
    else:
        report = generate_report(result, duration_ms, source=source)
        text = report.to_json() if format == "json" else report.to_markdown()
        typer.echo(text)

    if not result.valid:
        raise typer.Exit(1)


def _check_format(format: str) -> None:
    if format not in VALID_FORMATS:
        console.print(f"[red]Error:[/red] Invalid format '{format}'. Must be one of: {', '.join(VALID_FORMATS)}")
        raise typer.Exit(2)


@app.command()
def check(
    assignments: Annotated[
        List[str],
        typer.Argument(help="Attributes as NAME[.RESOURCE]=VALUE")
    ],
    request: Annotated[
        BatchRequest,
        typer.Option("--request", "-r", help="Batch request kind")
    ] = BatchRequest.QUEUE_JOB,
    parent: Annotated[
        ParentObject,
        typer.Option("--parent", "-p", help="Object the attributes belong to")
    ] = ParentObject.JOB,
    command: Annotated[
        ManagerCommand,
        typer.Option("--command", help="Manager command, for manager requests")
    ] = ManagerCommand.NONE,
    op: Annotated[
        Operator,
        typer.Option("--op", help="Operator attached to every attribute")
    ] = Operator.SET,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Site configuration (YAML)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json, markdown")
    ] = "text",
) -> None:
    """Verify attribute values given on the command line."""
    _check_format(format)
    attributes = [parse_assignment(a, op) for a in assignments]
    logger.debug(f"Verifying {len(attributes)} attributes for {request.value}")
    engine = VerifyEngine(_load_environment(config))

    with ReportTimer() as timer:
        result = engine.verify(request, attributes, parent, command)
    _emit(result, timer.duration_ms, format)


@app.command("check-file")
def check_file(
    path: Annotated[
        Path,
        typer.Argument(help="YAML request file")
    ],
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Site configuration (YAML)")
    ] = None,
    format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json, markdown")
    ] = "text",
) -> None:
    """Verify a request described in a YAML file."""
    _check_format(format)
    engine = VerifyEngine(_load_environment(config))

    try:
        with ReportTimer() as timer:
            result = engine.verify_file(path)
    except ConfigError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    _emit(result, timer.duration_ms, format, source=path)


@app.command()
def resources(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Site configuration (YAML)")
    ] = None,
) -> None:
    """List the resource definitions in effect."""
    env = _load_environment(config)

    table = Table(title="Resources")
    table.add_column("Name", style="cyan")
    table.add_column("Type")
    table.add_column("Value check")
    for name in sorted(env.resources, key=str.lower):
        definition = env.resources[name]
        table.add_row(definition.name, definition.datatype.value, definition.value_check_name or "")
    console.print(table)


if __name__ == "__main__":
    app()
