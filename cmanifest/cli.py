"""cmanifest CLI — the main entry point for the C header manifest extractor."""

from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from cmanifest import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """cmanifest — C header manifest extractor.

    Turn parsed C header declarations into per-header manifests that
    describe the public surface (imports, structs, enums, functions,
    properties) for template-based binding generators.
    """


# ── Extract ──────────────────────────────────────────────────────────


@main.command()
@click.argument("dump_path", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", default=None, help="Output directory for manifests")
@click.option("--format", "fmt", default=None, type=click.Choice(["json", "yaml"]))
@click.option("--config", "-c", "config_path", default=".", help="Config file or directory")
@click.option("--verbose", "-v", is_flag=True, help="Log every skipped declaration")
@click.option(
    "--log-file", default=None, type=click.Path(dir_okay=False), help="Also write the log here"
)
def extract(
    dump_path: str,
    output: str | None,
    fmt: str | None,
    config_path: str,
    verbose: bool,
    log_file: str | None,
):
    """Extract one manifest per header from a parsed-header dump.

    DUMP_PATH is the YAML/JSON file written by the header parser.
    """
    from cmanifest.config import ConfigError, load_config
    from cmanifest.grammar.loader import DumpFormatError, load_header_dump
    from cmanifest.logging import configure_logging
    from cmanifest.pipeline import process_header_dir

    configure_logging(verbose=verbose, log_file=log_file)
    console.print(f"\n[bold blue]cmanifest[/] — Extracting: {dump_path}\n")

    try:
        config = load_config(config_path)
        directory = load_header_dump(dump_path)
    except (ConfigError, DumpFormatError) as e:
        console.print(f"  [red]Failed to load:[/] {e}")
        raise SystemExit(1)

    if output:
        config.output_dir = Path(output)
    if fmt:
        config.format = fmt

    report = process_header_dir(directory, config)

    table = Table(title=f"Manifests ({len(report.results)} headers)")
    table.add_column("Header", style="cyan")
    table.add_column("Structs", justify="right")
    table.add_column("Enums", justify="right")
    table.add_column("Functions", justify="right")
    table.add_column("Properties", justify="right")
    table.add_column("Skipped", justify="right")
    table.add_column("Artifact")

    for result in report.results:
        info = result.file_info
        if not result.ok or info is None:
            table.add_row(result.path, "-", "-", "-", "-", "-", f"[red]{result.error}[/]")
            continue
        table.add_row(
            result.name,
            str(len(info.structs)),
            str(len(info.enums)),
            str(len(info.functions)),
            str(len(info.properties)),
            str(len(result.issues)),
            result.artifact,
        )

    console.print(table)

    if report.issues:
        console.print("\n[yellow]Skipped declarations:[/]")
        for issue in report.issues:
            console.print(f"  [yellow]![/] {issue}")

    console.print(Panel(report.summary(), title="Extraction Result"))

    if not report.passed:
        raise SystemExit(1)


# ── Inspect ──────────────────────────────────────────────────────────


@main.command()
@click.argument("dump_path", type=click.Path(exists=True, dir_okay=False))
@click.argument("header")
def inspect(dump_path: str, header: str):
    """Show what one header's manifest would contain, without writing it.

    HEADER is the header's base name (e.g. TWWallet) or its path in the dump.
    """
    from cmanifest.grammar.loader import DumpFormatError, load_header_dump
    from cmanifest.ir.errors import BadImport
    from cmanifest.pipeline import derive_file_name, extract_header

    try:
        directory = load_header_dump(dump_path)
    except DumpFormatError as e:
        console.print(f"  [red]Failed to load:[/] {e}")
        raise SystemExit(1)

    matches = []
    for path in directory.paths():
        try:
            name = derive_file_name(path)
        except BadImport:
            continue
        if header in (str(path), name):
            matches.append(path)
    if not matches:
        console.print(f"[yellow]No header named {header} in {dump_path}.[/]")
        raise SystemExit(1)

    result = extract_header(matches[0], directory.headers[matches[0]])
    info = result.file_info
    if info is None:
        console.print(f"[red]{result.error}[/]")
        raise SystemExit(1)

    table = Table(title=f"Manifest: {info.name}")
    table.add_column("Kind", style="dim")
    table.add_column("Name", style="cyan")
    table.add_column("Details")

    for imp in info.imports:
        table.add_row("import", "/".join(imp.path), "")
    for struct in info.structs:
        details = "forward" if struct.is_forward else f"{len(struct.fields)} field(s)"
        table.add_row("struct", struct.name, details)
    for enum in info.enums:
        table.add_row("enum", enum.name, f"{len(enum.variants)} variant(s)")
    for fn in info.functions:
        kind = "static" if fn.is_static else "method"
        table.add_row(kind, fn.name, f"{len(fn.params)} param(s)")
    for prop in info.properties:
        kind = "static property" if prop.is_static else "property"
        table.add_row(kind, prop.name, "")

    console.print(table)
    for issue in result.issues:
        console.print(f"  [yellow]![/] {issue}")


if __name__ == "__main__":
    main()
