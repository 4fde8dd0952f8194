"""Command-line interface for inspecting dictionary representations."""

from __future__ import annotations

import importlib
import json
import logging
import plistlib
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from automagic.codec import CodingError, from_dictionary, to_dictionary
from automagic.tools.report import build_report, differences

if TYPE_CHECKING:
    from automagic.tools.report import Difference, ReportNode


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug messages")
def cli(verbose: bool) -> None:
    """Automagic dictionary representation tools."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load(input_file: str) -> Any:
    """Read a dictionary representation from a .plist or .json file."""
    path = Path(input_file)
    suffix = path.suffix.lower()

    if suffix == ".plist":
        with open(path, "rb") as f:
            return plistlib.load(f)
    if suffix == ".json":
        with open(path, encoding="utf-8") as f:
            return json.load(f)

    print(f"Unknown file format: {path.suffix or input_file}")
    sys.exit(1)


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input .plist or .json file")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def inspect(input_file: str, output_json: bool) -> None:
    """Show how each value of a dictionary representation is classified."""
    report = build_report(_load(input_file))

    if output_json:
        print(report.to_json(indent=2))
    else:
        Console().print(_tree(report))


def _label(node: ReportNode) -> str:
    label = f"[bold]{escape(node.key)}[/bold] [cyan]{node.field_type}[/cyan]"
    if node.class_name:
        label += f" [green]{escape(node.class_name)}[/green]"
    if node.value_type:
        label += f" [dim]{node.value_type}[/dim]"
    if node.preview is not None:
        label += f" {escape(node.preview)}"
    return label


def _tree(node: ReportNode, parent: Tree | None = None) -> Tree:
    """Render a report as a rich tree."""
    branch = Tree(_label(node)) if parent is None else parent.add(_label(node))
    for child in node.children:
        _tree(child, branch)
    return branch


@cli.command()
@click.option("--input", "-i", "input_file", required=True, help="Input .plist or .json file")
@click.option(
    "--import",
    "-m",
    "modules",
    multiple=True,
    help="Module defining the codec classes (repeatable)",
)
def roundtrip(input_file: str, modules: tuple[str, ...]) -> None:
    """Decode a dictionary representation and check it encodes back unchanged."""
    data = _load(input_file)
    console = Console()

    for module in modules:
        importlib.import_module(module)

    try:
        encoded = to_dictionary(from_dictionary(data))
    except CodingError as exc:
        console.print(f"[bold red]{type(exc).__name__}[/bold red]: {escape(str(exc))}")
        sys.exit(1)

    found = differences(data, encoded)
    if found:
        console.print(_difference_table(found))
        sys.exit(1)

    console.print("[bold green]Round trip OK[/bold green]")


def _difference_table(found: list[Difference]) -> Table:
    table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    table.add_column("Path", style="white")
    table.add_column("Expected", style="yellow")
    table.add_column("Actual", style="red")

    for difference in found:
        table.add_row(
            escape(difference.path),
            escape(repr(difference.expected)),
            escape(repr(difference.actual)),
        )
    return table


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
