"""
This file is the entry point for the 'manageable' command-line tool.
It inspects classes the way the exporter would, without exporting anything.

    manageable inspect mypkg.pool:ConnectionPool
    manageable check mypkg.pool:ConnectionPool --config settings.yaml
"""
import importlib
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from common.app_setup import print_and_log, print_error, setup_from_settings
from manageable.descriptors import BuildResult, build_descriptors
from manageable.errors import ManagementError
from manageable.models import AttributeInfo, ExporterSettings, OperationInfo, coerce_settings
from manageable.scanner import scan

app = typer.Typer(add_completion=False, help="Inspect the manageable surface of Python classes.")

logger = logging.getLogger(__name__)


def _load_class(target: str) -> type:
    """Import 'package.module:ClassName'."""
    module_name, sep, qualname = target.partition(":")
    if not sep or not module_name or not qualname:
        raise typer.BadParameter(f"Expected 'module:Class', got {target!r}")
    try:
        obj = importlib.import_module(module_name)
    except ImportError as e:
        raise typer.BadParameter(f"Cannot import {module_name!r}: {e}")
    for part in qualname.split("."):
        obj = getattr(obj, part, None)
        if obj is None:
            raise typer.BadParameter(f"{module_name!r} has no attribute {qualname!r}")
    if not isinstance(obj, type):
        raise typer.BadParameter(f"{target!r} is not a class")
    return obj


def _settings(config: Path | None) -> ExporterSettings:
    try:
        settings = coerce_settings(config)
    except (OSError, ValueError) as e:
        raise typer.BadParameter(f"Cannot load settings from {config}: {e}")
    setup_from_settings(settings)
    return settings


def _describe(cls: type) -> BuildResult:
    return build_descriptors(scan(cls))


@app.command()
def inspect(target: str = typer.Argument(..., help="Class to inspect, as 'module:Class'"),
            config: Path | None = typer.Option(None, help="Settings file (YAML or JSON)")):
    """List the attributes and operations a class would export."""
    _settings(config)
    cls = _load_class(target)
    try:
        result = _describe(cls)
    except ManagementError as e:
        print_error(escape(e.message))
        raise typer.Exit(1)

    attributes = Table(title=f"Attributes of {cls.__qualname__}")
    for column in ("Name", "Type", "Access", "Description"):
        attributes.add_column(column)
    for _, descriptor in sorted(result.attributes.items()):
        info = AttributeInfo.from_descriptor(descriptor)
        access = ("r" if info.readable else "-") + ("w" if info.writable else "-")
        attributes.add_row(escape(info.name), escape(info.type), access, escape(info.description or ""))

    operations = Table(title=f"Operations of {cls.__qualname__}")
    for column in ("Name", "Parameters", "Returns", "Description"):
        operations.add_column(column)
    for op in sorted(result.operations.values(), key=lambda op: op.name):
        info = OperationInfo.from_descriptor(op)
        operations.add_row(escape(info.name), escape(", ".join(info.params)), escape(info.returns),
                           escape(info.description or ""))

    console = Console()
    console.print(attributes)
    console.print(operations)
    for issue in result.issues:
        print_error(escape(issue.message))
    logger.info(f"Inspected {target}")


@app.command()
def check(target: str = typer.Argument(..., help="Class to check, as 'module:Class'"),
          config: Path | None = typer.Option(None, help="Settings file (YAML or JSON)")):
    """Fail when a class has malformed or inconsistent @managed declarations."""
    _settings(config)
    cls = _load_class(target)
    try:
        result = _describe(cls)
    except ManagementError as e:
        print_error(escape(e.message))
        raise typer.Exit(1)
    if result.issues:
        for issue in result.issues:
            print_error(escape(issue.message))
        raise typer.Exit(1)
    print_and_log(escape(f"{target}: {len(result.attributes)} attributes, "
                         f"{len(result.operations)} operations, no problems found"))


if __name__ == "__main__":
    app()
