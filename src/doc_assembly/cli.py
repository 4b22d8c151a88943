"""
CLI for documentation assembly.

Usage:
    doc-assembly docs
    doc-assembly helpers --only Playwright --only Appium
    doc-assembly build-lib --for-typings
    doc-assembly changelog
    doc-assembly ci
    doc-assembly section docker/README.md --name docker --title Docker
    doc-assembly remote-sections
    doc-assembly config
"""

import asyncio
import functools
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from doc_assembly import __version__
from doc_assembly.config import DocAssemblyConfig
from doc_assembly.errors import DocAssemblyError
from doc_assembly.logging import configure_logging
from doc_assembly.orchestrator import DocumentationOrchestrator
from doc_assembly.settings import DocAssemblySettings

console = Console()


def _load_config(config_path: str | None, project_root: str | None) -> DocAssemblyConfig:
    settings = DocAssemblySettings()
    path = Path(config_path) if config_path else settings.config_file
    config = DocAssemblyConfig.from_yaml(path) if path else DocAssemblyConfig()
    if project_root:
        config.project_root = Path(project_root)
    return config


def _handle_errors(func):
    """Print pipeline errors and exit with status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except DocAssemblyError as e:
            console.print(f"\n[bold red]❌ {e.__class__.__name__}:[/bold red] {escape(str(e))}")
            context = e.context.to_dict()
            if context.get("stderr"):
                console.print(context["stderr"], markup=False, highlight=False)
            raise SystemExit(1) from e

    return wrapper


def _print_pages(title: str, paths: list[Path]) -> None:
    table = Table(title=title)
    table.add_column("Page", style="cyan")
    table.add_column("Size", justify="right")

    for path in paths:
        table.add_row(str(path), f"{path.stat().st_size:,} bytes")

    console.print(table)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file.",
)
@click.option(
    "--project-root", "-p",
    type=click.Path(exists=True, file_okay=False),
    help="Root of the documented project (overrides the configuration).",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, project_root: str | None):
    """Assemble reference documentation from source doc-comments."""
    settings = DocAssemblySettings()
    configure_logging(level=settings.log_level, format=settings.log_format)

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["project_root"] = project_root


def _orchestrator(ctx: click.Context) -> DocumentationOrchestrator:
    config = _load_config(ctx.obj["config_path"], ctx.obj["project_root"])
    return DocumentationOrchestrator(config)


@cli.command()
@click.pass_context
@_handle_errors
def docs(ctx: click.Context):
    """Generate helper, plugin and external helper documentation."""
    console.print("\n[bold blue]📚 Building documentation[/bold blue]\n")

    summary = _orchestrator(ctx).generate_all()

    table = Table(title="Generation Summary")
    table.add_column("Category", style="cyan")
    table.add_column("Pages", justify="right")
    for category, paths in summary.items():
        table.add_row(category, str(len(paths)))
    console.print(table)


@cli.command()
@click.option("--only", multiple=True, help="Module identifiers to build (all if omitted).")
@click.pass_context
@_handle_errors
def helpers(ctx: click.Context, only: tuple):
    """Generate one page per helper module."""
    paths = _orchestrator(ctx).generate_helpers(only=list(only) or None)
    _print_pages("Helper pages", paths)


@cli.command()
@click.pass_context
@_handle_errors
def plugins(ctx: click.Context):
    """Generate the combined plugins page."""
    pages = asyncio.run(_orchestrator(ctx).build_plugins())
    if not pages:
        console.print("[yellow]⚠️  No plugin modules found[/yellow]")
        return
    _print_pages("Plugins", [page.path for page in pages])


@cli.command("external-helpers")
@click.pass_context
@_handle_errors
def external_helpers(ctx: click.Context):
    """Generate pages for helpers shipped by other packages."""
    pages = asyncio.run(_orchestrator(ctx).build_external_helpers())
    _print_pages("External helpers", [page.path for page in pages])


@cli.command("build-lib")
@click.option(
    "--for-typings",
    is_flag=True,
    help="Keep internal type aliases for the type-definition generator.",
)
@click.pass_context
@_handle_errors
def build_lib(ctx: click.Context, for_typings: bool):
    """Write substituted copies of all helper modules to the build directory."""
    paths = asyncio.run(_orchestrator(ctx).build_lib(for_typings=for_typings))
    console.print(f"[green]✅ {len(paths)} modules written[/green]")
    for path in paths:
        console.print(f"  {path}")


@cli.command()
@click.pass_context
@_handle_errors
def changelog(ctx: click.Context):
    """Generate the releases page from CHANGELOG.md."""
    page = _orchestrator(ctx).build_changelog()
    console.print(f"[green]✅ {page.path}[/green]")


@cli.command()
@click.pass_context
@_handle_errors
def ci(ctx: click.Context):
    """Generate the continuous integration recipes page."""
    page = asyncio.run(_orchestrator(ctx).build_ci())
    console.print(f"[green]✅ {page.path}[/green]")


@cli.command()
@click.argument("source", type=click.Path())
@click.option("--name", "-n", required=True, help="Page name, also used for the permalink.")
@click.option("--title", "-t", required=True, help="Page title.")
@click.option("--heading", help="Heading written above the content.")
@click.option("--note", help="Quoted note written under the heading.")
@click.pass_context
@_handle_errors
def section(ctx: click.Context, source: str, name: str, title: str, heading: str | None, note: str | None):
    """Wrap a markdown file, or a markdown URL, as a section page."""
    orchestrator = _orchestrator(ctx)
    if source.startswith(("http://", "https://")):
        page = asyncio.run(
            orchestrator.build_remote_section(source, name=name, title=title, heading=heading, note=note)
        )
    else:
        page = orchestrator.build_section(Path(source), name=name, title=title, heading=heading, note=note)
    console.print(f"[green]✅ {page.path}[/green]")


@cli.command("remote-sections")
@click.pass_context
@_handle_errors
def remote_sections(ctx: click.Context):
    """Generate the configured section pages fetched from other repositories."""
    pages = asyncio.run(_orchestrator(ctx).build_remote_sections())
    _print_pages("Remote sections", [page.path for page in pages])


@cli.command("config")
@click.pass_context
@_handle_errors
def show_config(ctx: click.Context):
    """Print the effective configuration as YAML."""
    config = _load_config(ctx.obj["config_path"], ctx.obj["project_root"])
    console.print(
        yaml.safe_dump(config.to_dict(), sort_keys=False),
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
