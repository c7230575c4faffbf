"""Command-line interface for pptx-opc."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from pptx_opc.errors import IssueSeverity, OpcError, PackageIssue
from pptx_opc.package import OpcPackage

console = Console()
error_console = Console(stderr=True)

SEVERITY_STYLES = {
    IssueSeverity.ERROR: "red",
    IssueSeverity.WARNING: "yellow",
    IssueSeverity.INFO: "blue",
}


def _load(path: Path, strict: bool) -> OpcPackage:
    try:
        return OpcPackage.open(path, strict=strict)
    except OpcError as exc:
        error_console.print(f"[red]Error:[/red] {path}: {exc}")
        sys.exit(1)


def _issue_dict(issue: PackageIssue) -> dict[str, str]:
    return {
        "kind": issue.kind.value,
        "severity": issue.severity.value,
        "part_uri": issue.part_uri,
        "description": issue.description,
    }


@click.group()
@click.option("--verbose", "-v", count=True, help="Log package activity (-vv for debug).")
def main(verbose: int) -> None:
    """Inspect and round-trip Open XML presentation packages."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
def parts(path: Path, output: str) -> None:
    """List every part with its content type, size and relationship count."""
    package = _load(path, strict=False)

    if output == "json":
        console.print_json(
            json.dumps(
                [
                    {
                        "partname": part.partname,
                        "content_type": part.content_type,
                        "size": len(part.blob),
                        "relationships": len(part.rels),
                    }
                    for part in package.iter_parts()
                ]
            )
        )
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("Part")
    table.add_column("Content type", style="dim")
    table.add_column("Bytes", justify="right")
    table.add_column("Rels", justify="right")
    for part in package.iter_parts():
        table.add_row(part.partname, part.content_type, str(len(part.blob)), str(len(part.rels)))
    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--part",
    "source",
    default="/",
    show_default=True,
    help="Source part whose relationships to list ('/' for the package).",
)
def rels(path: Path, source: str) -> None:
    """List the relationships owned by one part or by the package."""
    package = _load(path, strict=False)
    try:
        collection = package.relationships if source == "/" else package.part(source).rels
    except OpcError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)

    table = Table(show_header=True, header_style="bold")
    table.add_column("Id", width=8)
    table.add_column("Type", style="dim")
    table.add_column("Target")
    table.add_column("Mode", width=8)
    for rel in collection:
        table.add_row(rel.id, rel.type.rsplit("/", 1)[-1], rel.target, rel.target_mode)
    console.print(table)


@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--policy",
    type=click.Choice(["strict", "permissive"], case_sensitive=False),
    default="permissive",
    help="Loading policy (strict makes damaged entries fatal).",
)
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@click.option("--quiet", "-q", is_flag=True, help="Only output problems, no success messages.")
def check(path: Path, policy: str, output: str, quiet: bool) -> None:
    """Check that every relationship target exists and every part has a content type."""
    package = _load(path, strict=policy == "strict")
    issues = package.load_issues + package.validate_structure()
    has_errors = any(i.severity == IssueSeverity.ERROR for i in issues)

    if output == "json":
        console.print_json(
            json.dumps(
                {
                    "file": str(path),
                    "valid": not has_errors,
                    "issues": [_issue_dict(i) for i in issues],
                }
            )
        )
    elif not issues:
        if not quiet:
            console.print(f"[green]✓[/green] {path} - {len(package)} parts, no problems")
    else:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Kind", style="dim", width=12)
        table.add_column("Severity", width=8)
        table.add_column("Location", width=36)
        table.add_column("Description")
        for issue in issues:
            style = SEVERITY_STYLES.get(issue.severity, "white")
            table.add_row(
                issue.kind.value,
                f"[{style}]{issue.severity.value}[/{style}]",
                issue.part_uri,
                issue.description,
            )
        console.print(table)

    sys.exit(1 if has_errors else 0)


@main.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
def roundtrip(source: Path, target: Path) -> None:
    """Load SOURCE and save it unchanged to TARGET."""
    package = _load(source, strict=False)
    for issue in package.load_issues:
        error_console.print(f"[yellow]Warning:[/yellow] {issue}")
    try:
        package.save(target)
    except OpcError as exc:
        error_console.print(f"[red]Error:[/red] {exc}")
        sys.exit(1)
    console.print(f"[green]✓[/green] wrote {target} ({len(package)} parts)")


if __name__ == "__main__":
    main()
