from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import GeneratorConfig
from .errors import ConfigurationError, DistError
from .generator import GenerationReport, ManifestGenerator
from .platforms import KNOWN_TRIPLES, translate_triple
from .utils.json_logger import configure_logging

app = typer.Typer(
    name="srdn-dist",
    help="Generate npm distribution packages for the prebuilt srdn binary",
    rich_markup_mode="rich",
)
console = Console()


def _packages_table(report: GenerationReport) -> Table:
    title = "Planned packages" if report.dry_run else "Generated packages"
    table = Table(title=title)
    table.add_column("Triple", style="cyan")
    table.add_column("Package", style="magenta")
    table.add_column("os/cpu")
    table.add_column("Binary")
    for package in report.packages:
        table.add_row(
            package.target.triple,
            f"{package.name}@{package.version}",
            f"{package.target.os}/{package.target.cpu}",
            package.binary,
        )
    return table


@app.command("build")
def build_cmd(
    root: Optional[Path] = typer.Option(
        None, "--root", help="Repository root holding package.json and artifacts/"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML configuration file"
    ),
    triples: Optional[List[str]] = typer.Option(
        None, "--triple", "-t", help="Target triple to package (repeatable)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be generated without writing"
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
    log_format: Optional[str] = typer.Option(
        None, "--log-format", help="Log output format: json or text"
    ),
) -> None:
    """Generate per-platform npm packages and the umbrella manifests."""
    try:
        config = GeneratorConfig.load(config_file).merged(
            root=root,
            triples=list(triples) if triples else None,
            log_level=log_level,
            log_format=log_format,
        )
        errors = config.validate()
        if errors:
            raise ConfigurationError("; ".join(errors))
        configure_logging(config.log_level, config.log_format)

        generator = ManifestGenerator(config)
        report = generator.plan() if dry_run else generator.run()
    except DistError as e:
        console.print(f"[red]FAIL: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(_packages_table(report))
    if report.dry_run:
        console.print("[yellow]DRY RUN - no files were written[/yellow]")
    else:
        console.print(
            f"[green]OK: {len(report.packages)} platform package(s) and umbrella manifests written[/green]"
        )


@app.command("triples")
def triples_cmd(
    show_all: bool = typer.Option(
        False, "--all", help="List every known triple, not only the configured build set"
    ),
    config_file: Optional[Path] = typer.Option(
        None, "--config", help="YAML configuration file"
    ),
) -> None:
    """List target triples with their npm platform mapping."""
    try:
        config = GeneratorConfig.load(config_file)
        triples = KNOWN_TRIPLES if show_all else config.triples
        targets = [translate_triple(triple) for triple in triples]
    except DistError as e:
        console.print(f"[red]FAIL: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    table = Table(title="Target triples")
    table.add_column("Triple", style="cyan")
    table.add_column("Tag", style="magenta")
    table.add_column("os")
    table.add_column("cpu")
    table.add_column("Binary")
    for target in targets:
        table.add_row(
            target.triple,
            target.tag,
            target.os,
            target.cpu,
            target.binary_name(config.binary_stem),
        )
    console.print(table)


@app.command("translate")
def translate_cmd(
    triple: str = typer.Argument(..., help="Target triple, e.g. x86_64-unknown-linux-gnu"),
) -> None:
    """Show the npm tag, os and cpu for one target triple."""
    try:
        target = translate_triple(triple)
    except DistError as e:
        console.print(f"[red]FAIL: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    console.print(f"tag:    {target.tag}")
    console.print(f"os:     {target.os}")
    console.print(f"cpu:    {target.cpu}")
    console.print(f"binary: {target.binary_name()}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
