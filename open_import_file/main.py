"""open-import-file CLI - resolve JavaScript/TypeScript import specifiers to files."""

import asyncio
import logging
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from .console import console
from .console import error_console
from .logging_setup import init_logging
from .paths import create_resolver
from .resolver import ImportResolver
from .resolver import resolve_import
from .resolver import to_path
from .resolver import to_uri
from .resolver.normalize import normalize_path
from .scanner import ImportSpan
from .scanner import import_spec_at
from .scanner import scan_imports
from .settings import debug_from_env

logger = logging.getLogger(__name__)

_root_option = click.option(
    "--root",
    "-r",
    "roots",
    multiple=True,
    type=click.Path(file_okay=False, path_type=Path),
    help="Workspace folder (repeatable; default: current directory)",
)


def _create_resolver(ctx: click.Context, roots: tuple[Path, ...], requesting_file: Path | None) -> ImportResolver:
    resolver = create_resolver(roots, requesting_file)
    if resolver.settings.debug and not ctx.obj.get("debug"):
        init_logging(path=ctx.obj.get("log_file"), debug=True)
        ctx.obj["debug"] = True
    return resolver


def _print_location(path: Path, as_uri: bool) -> None:
    click.echo(to_uri(path) if as_uri else str(path))


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Trace each resolution step (also: OPEN_IMPORT_FILE_DEBUG=1)")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Write logs as JSONL to this file")
@click.pass_context
def cli(ctx: click.Context, debug: bool, log_file: str | None):
    """Resolve import specifiers to the files they point to."""
    debug = debug or bool(debug_from_env())
    init_logging(path=log_file, debug=debug)
    ctx.obj = {"debug": debug, "log_file": log_file}
    if ctx.invoked_subcommand is None:
        click.echo("\n" + ctx.get_help())
        ctx.exit()


@cli.command(name="resolve")
@click.argument("spec")
@click.option(
    "--from", "-f", "from_file", type=click.Path(dir_okay=False, path_type=Path), help="File containing the import"
)
@_root_option
@click.option("--uri", "as_uri", is_flag=True, help="Print a file:// URI instead of a path")
@click.pass_context
def resolve_cmd(ctx: click.Context, spec: str, from_file: Path | None, roots: tuple[Path, ...], as_uri: bool):
    """Resolve SPEC as imported from --from."""
    requesting_file = normalize_path(from_file) if from_file else None
    resolver = _create_resolver(ctx, roots, requesting_file)

    found = asyncio.run(resolve_import(spec, requesting_file, resolver=resolver))
    if found is None:
        error_console.print(f"[yellow]Unresolved:[/yellow] {escape(spec)} (external package or missing file)")
        ctx.exit(1)
    _print_location(found, as_uri)


@cli.command(name="at")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@click.argument("column", type=click.IntRange(min=1))
@_root_option
@click.option("--uri", "as_uri", is_flag=True, help="Print a file:// URI instead of a path")
@click.pass_context
def at_cmd(ctx: click.Context, file: Path, line: int, column: int, roots: tuple[Path, ...], as_uri: bool):
    """Resolve the import under LINE:COLUMN (1-based) in FILE."""
    requesting_file = normalize_path(file)
    text = requesting_file.read_text(encoding="utf-8", errors="replace")

    span = import_spec_at(text, line - 1, column - 1)
    if span is None:
        error_console.print(f"[yellow]No import specifier at {escape(str(file))}:{line}:{column}[/yellow]")
        ctx.exit(1)

    resolver = _create_resolver(ctx, roots, requesting_file)
    found = asyncio.run(resolve_import(span.spec, requesting_file, resolver=resolver))
    if found is None:
        error_console.print(f"[yellow]Unresolved:[/yellow] {escape(span.spec)} (external package or missing file)")
        ctx.exit(1)
    _print_location(found, as_uri)


async def _resolve_spans(resolver: ImportResolver, spans: list[ImportSpan], requesting_file: Path):
    return [(span, await resolver.resolve(span.spec, requesting_file)) for span in spans]


@cli.command(name="scan")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@_root_option
@click.pass_context
def scan_cmd(ctx: click.Context, file: Path, roots: tuple[Path, ...]):
    """List every import in FILE and where it resolves."""
    requesting_file = normalize_path(file)
    spans = scan_imports(requesting_file.read_text(encoding="utf-8", errors="replace"))
    if not spans:
        console.print("[yellow]No imports found.[/yellow]")
        return

    resolver = _create_resolver(ctx, roots, requesting_file)
    results = asyncio.run(_resolve_spans(resolver, spans, requesting_file))

    table = Table(title=f"Imports in {escape(file.name)}", show_header=True, header_style="bold cyan")
    table.add_column("Line", justify="right")
    table.add_column("Specifier", style="green")
    table.add_column("Resolved")

    for span, found in results:
        resolved = escape(str(found)) if found else "[dim]external / unresolved[/dim]"
        table.add_row(str(span.line + 1), escape(span.spec), resolved)

    console.print(table)


@cli.command(name="config")
@click.option(
    "--from", "-f", "from_file", type=click.Path(dir_okay=False, path_type=Path), help="File whose context to show"
)
@_root_option
@click.pass_context
def config_cmd(ctx: click.Context, from_file: Path | None, roots: tuple[Path, ...]):
    """Show the alias configuration that applies to a file."""
    requesting_file = normalize_path(from_file) if from_file else None
    resolver = _create_resolver(ctx, roots, requesting_file)
    root = resolver.workspace.root_for(requesting_file)
    snapshot = resolver.loader.load(root, requesting_file)

    console.print(f"[bold]Project root:[/bold] {escape(str(snapshot.project_root))}")
    console.print(f"[bold]Path-mapping config:[/bold] {escape(str(snapshot.config_file or '(none)'))}")
    console.print(f"[bold]Base URL:[/bold] {escape(str(snapshot.base_url or '(none)'))}")

    if snapshot.is_empty:
        console.print("[yellow]No aliases configured.[/yellow]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Source", style="magenta")
    table.add_column("Pattern", style="green")
    table.add_column("Target")
    for alias, target in snapshot.aliases.items():
        table.add_row("bundler", escape(alias), escape(str(target)))
    for pattern, targets in snapshot.paths.items():
        table.add_row("paths", escape(pattern), escape(", ".join(targets)))
    console.print(table)


@cli.command(name="open")
@click.argument("target")
@click.pass_context
def open_cmd(ctx: click.Context, target: str):
    """Open TARGET (a path or file:// URI) with the system handler."""
    path = to_path(target)
    if path is None:
        path = normalize_path(target)

    if not path.is_file():
        error_console.print(f"[red]Unable to open file:[/red] {escape(str(path))} (not found)")
        ctx.exit(1)

    logger.debug(f"Opening {path}")
    ctx.exit(click.launch(str(path)))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
