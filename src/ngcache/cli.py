"""Command-line interface for ngcache."""

import logging
from pathlib import Path

import click
from rich.markup import escape
from rich.table import Table

from ngcache import __version__
from ngcache.config import (
    DEFAULT_CONFIG,
    NgCacheConfig,
    get_home_config_path,
    get_local_config_path,
    home_config_exists,
    load_config,
    local_config_exists,
    save_config,
)
from ngcache.config.schema import EOL_STYLE_NAMES
from ngcache.console import console
from ngcache.directives import (
    COMMENT_TAG,
    DirectiveError,
    MalformedDirectiveError,
    extract,
    has_directive,
    parse_parameters,
)
from ngcache.output import write_result
from ngcache.paths import document_dir, resolve_directory, resolve_target
from ngcache.pipeline import Document, DocumentPipeline, PipelineResult, Stage, find_documents
from ngcache.reporting import Reporter
from ngcache.transforms import TransformNotFoundError, get_transform_names, load_transforms

logger = logging.getLogger(__name__)


def version_callback(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return
    console.print(f"ngcache [bold cyan]{__version__}[/bold cyan]")
    ctx.exit()


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="[%(levelname)s] %(message)s")


def _resolve_root(root: Path | None) -> Path:
    return (root or Path.cwd()).resolve()


@click.group(invoke_without_command=True)
@click.option(
    "--version",
    is_flag=True,
    callback=version_callback,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.pass_context
def main(ctx: click.Context) -> None:
    """ngcache - build AngularJS $templateCache loaders from HTML comment blocks."""
    if ctx.invoked_subcommand is None:
        console.print("[bold]ngcache[/bold] - AngularJS template cache loader builder")
        console.print("\nRun [cyan]ngcache --help[/cyan] for available commands.")


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root for root-anchored paths (default: cwd).",
)
@click.option(
    "--file-name",
    "-f",
    help="Default cache loader file name when a block declares no target.",
)
@click.option(
    "--add-include/--no-add-include",
    default=None,
    help="Add a <script> include for the loader to the page (default: add).",
)
@click.option(
    "--replace-block/--keep-block",
    default=None,
    help="Replace the comment block instead of keeping it (default: keep).",
)
@click.option(
    "--source-filter",
    "-s",
    help="Glob selecting template files in source folders.",
)
@click.option(
    "--transform",
    "-t",
    "transforms",
    multiple=True,
    help="Transform to apply to templates (name or module:attr). Repeatable.",
)
@click.option(
    "--eol",
    type=click.Choice(list(EOL_STYLE_NAMES)),
    help="Line endings of generated loaders (default: native).",
)
@click.option(
    "--parallel",
    "-p",
    type=click.IntRange(min=1),
    help="Number of documents to process in parallel.",
)
@click.option("--quiet", "-q", is_flag=True, help="Only report failures.")
@click.option("--dry-run", is_flag=True, help="Process documents without writing files.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def build(
    ctx: click.Context,
    paths: tuple[Path, ...],
    root: Path | None,
    file_name: str | None,
    add_include: bool | None,
    replace_block: bool | None,
    source_filter: str | None,
    transforms: tuple[str, ...],
    eol: str | None,
    parallel: int | None,
    quiet: bool,
    dry_run: bool,
    verbose: bool,
) -> None:
    """Build cache loaders for the HTML documents under PATHS.

    PATHS may be files or folders (default: the project root).
    """
    _configure_logging(verbose)
    project_root = _resolve_root(root)

    cli_config = NgCacheConfig.from_dict(
        {
            "file_name": file_name,
            "source_filter": source_filter,
            "transforms": list(transforms) if transforms else None,
            "add_include": add_include,
            "replace_block": replace_block,
            "eol": eol,
            "quiet": True if quiet else None,
            "parallel": parallel,
        }
    )
    config = load_config(project_root).merge(cli_config)
    logger.debug("Config: %s", config.to_dict())

    try:
        transform = load_transforms(config.transforms or ())
    except TransformNotFoundError as e:
        raise click.BadParameter(str(e), param_hint="--transform") from e

    document_paths = find_documents(
        paths or (project_root,), project_root, config.source_filter or ""
    )
    if not document_paths:
        console.print("[yellow]No HTML documents found.[/yellow]")
        return

    reporter = Reporter(quiet=bool(config.quiet))
    pipeline = DocumentPipeline(config, transform=transform, reporter=reporter)

    documents = []
    results: list[PipelineResult] = []
    for path in document_paths:
        try:
            documents.append(Document.load(path, project_root))
        except (OSError, UnicodeDecodeError) as e:
            unreadable = Document(path=path, root=project_root, contents="")
            reporter.failed(unreadable, e)
            results.append(PipelineResult.failure(unreadable, Stage.SCANNING, e))

    processed = pipeline.run(documents)

    if dry_run:
        console.print("[dim]Dry run: no files written.[/dim]")
        results.extend(processed)
    else:
        for result in processed:
            try:
                write_result(result)
            except OSError as e:
                reporter.failed(result.document, e)
                result = PipelineResult.failure(result.document, Stage.EMITTING, e)
            results.append(result)

    reporter.summary(results)
    if any(not r.ok for r in results):
        ctx.exit(1)


@main.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=True, path_type=Path))
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root for root-anchored paths (default: cwd).",
)
def inspect(paths: tuple[Path, ...], root: Path | None) -> None:
    """Show the templates:build blocks found under PATHS without building."""
    project_root = _resolve_root(root)
    config = load_config(project_root)

    document_paths = find_documents(
        paths or (project_root,), project_root, config.source_filter or ""
    )

    table = Table(title="templates:build blocks", show_lines=False)
    table.add_column("Document", style="magenta")
    table.add_column("Module", style="cyan")
    table.add_column("Sources")
    table.add_column("Target")

    found = 0
    for path in document_paths:
        try:
            document = Document.load(path, project_root)
        except (OSError, UnicodeDecodeError) as e:
            found += 1
            relative = Document(path=path, root=project_root, contents="").relative_path
            table.add_row(escape(relative), "", f"[red]{escape(str(e))}[/red]", "")
            continue
        if not has_directive(document.contents):
            continue
        found += 1
        try:
            block = extract(document.contents)
            if block is None:
                raise MalformedDirectiveError(f"'{COMMENT_TAG}' block not in correct format.")
            directive = parse_parameters(block.text, default_target=config.file_name or "")
        except DirectiveError as e:
            table.add_row(escape(document.relative_path), "", f"[red]{escape(str(e))}[/red]", "")
            continue

        doc_dir = document_dir(document.path, project_root)
        sources = []
        for source in directive.sources:
            resolved = resolve_directory(doc_dir, source)
            prefix = "/" if resolved.from_root else ""
            sources.append(f"{prefix}{resolved.path}")
        table.add_row(
            escape(document.relative_path),
            escape(directive.module),
            escape("\n".join(sources)),
            escape(str(resolve_target(doc_dir, directive.target))),
        )

    if not found:
        console.print("[dim]No templates:build blocks found.[/dim]")
        return
    console.print(table)


@main.command("config")
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (default: cwd).",
)
def show_config(root: Path | None) -> None:
    """Show the current effective configuration."""
    project_root = _resolve_root(root)
    config = load_config(project_root)

    console.print("\n[bold]Current Effective Configuration:[/bold]")
    console.print(f"  [dim]Global: {get_home_config_path()}[/dim]")
    console.print(f"  [dim]Local: {get_local_config_path(project_root)}[/dim]")
    console.print()

    for key, value in config.to_dict().items():
        console.print(f"  {key}: {escape(str(value))}")

    console.print()
    if home_config_exists():
        console.print("  [green]Global config: exists[/green]")
    else:
        console.print("  [dim]Global config: not found[/dim]")
    if local_config_exists(project_root):
        console.print("  [green]Local config: exists[/green]")
    else:
        console.print("  [dim]Local config: not found[/dim]")

    console.print(f"\n  [dim]Built-in transforms: {', '.join(get_transform_names())}[/dim]")


@main.command()
@click.option(
    "--root",
    "-r",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Project root (default: cwd).",
)
@click.option("--force", is_flag=True, help="Overwrite an existing config file.")
def init(root: Path | None, force: bool) -> None:
    """Write a project config file with the default settings."""
    path = get_local_config_path(_resolve_root(root))
    if path.exists() and not force:
        console.print(f"[yellow]Config already exists: {path}[/yellow]")
        console.print("[dim]Use --force to overwrite.[/dim]")
        return

    save_config(DEFAULT_CONFIG, path)
    console.print(f"[green]✓[/green] Wrote {path}")


if __name__ == "__main__":
    main()
