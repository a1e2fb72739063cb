"""Command line interface for blame-lens."""

import logging
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from blame_lens.core.git_client import GitClient
from blame_lens.core.parser import AttributionParser
from blame_lens.core.renderer import AnnotationRenderer
from blame_lens.editor.buffer import FileBuffer
from blame_lens.editor.decorations import InMemoryDecorationSink
from blame_lens.errors import ConfigurationInvalid, ToolUnavailable
from blame_lens.models.config import BlameConfig, load_config
from blame_lens.models.context import CursorContext, Selection

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def _load_config_or_exit(
    config_path: Optional[str], project_root: Path, **overrides
) -> BlameConfig:
    try:
        return load_config(
            Path(config_path) if config_path else None,
            project_root=project_root,
            **overrides,
        )
    except ConfigurationInvalid as e:
        console.print(f"[red]Invalid configuration: {escape(str(e))}[/red]")
        raise click.Abort() from e


def _make_renderer(
    file_path: Path, config: BlameConfig, sink: InMemoryDecorationSink
) -> AnnotationRenderer:
    """Build a renderer for ``file_path`` or exit if it is not under git."""
    git_client = GitClient(file_path)
    try:
        git_client.require_work_tree()
    except ToolUnavailable as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    parser = AttributionParser(
        local_identity=git_client.get_local_identity(),
        uncommitted_message=config.uncommitted_changes_message,
    )
    renderer = AnnotationRenderer(config, git_client, sink, parser=parser)
    return renderer


@click.group()
@click.version_option(package_name="blame-lens")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """blame-lens - inline git blame annotations."""
    _setup_logging(verbose)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--line", "-l", type=int, default=1, help="First line to annotate")
@click.option("--end", "-e", type=int, help="Last line to annotate")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file")
@click.option("--no-prettify", is_flag=True, help="Show absolute commit times")
@click.option("--min-offset", type=int, help="Column annotations are pushed towards")
def annotate(
    file: str,
    line: int,
    end: Optional[int],
    config_path: Optional[str],
    no_prettify: bool,
    min_offset: Optional[int],
):
    """Print lines of FILE with their blame annotations."""
    file_path = Path(file).resolve()
    buffer = FileBuffer(file_path)
    sink = InMemoryDecorationSink()

    config = _load_config_or_exit(
        config_path,
        file_path.parent,
        prettify_time=False if no_prettify else None,
        min_offset=min_offset,
    )
    renderer = _make_renderer(file_path, config, sink)
    if not renderer.formatter.check_config():
        console.print("[yellow]Warning: all annotation templates are disabled[/yellow]")

    end = end or line
    if end < line:
        line, end = end, line
    end = min(end, buffer.line_count())
    if buffer.line_count() == 0 or line > end:
        console.print("[yellow]Nothing to annotate[/yellow]")
        return

    selection = Selection(line, end) if end > line else None
    context = CursorContext(
        line_number=line, line_text=buffer.line_text(line), selection=selection
    )
    renderer.render(buffer, context)

    for number in range(line, end + 1):
        output = Text(f"{number:>5} ", style="dim")
        output.append(buffer.line_text(number))
        decoration = sink.at(buffer.line_end_position(number))
        if decoration is not None:
            output.append(decoration.text, style="italic cyan")
        console.print(output, highlight=False, soft_wrap=True)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("line", type=int)
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file")
def show(file: str, line: int, config_path: Optional[str]):
    """Show commit details for LINE of FILE."""
    file_path = Path(file).resolve()
    config = _load_config_or_exit(config_path, file_path.parent)
    renderer = _make_renderer(file_path, config, InMemoryDecorationSink())

    info = renderer.describe(FileBuffer(file_path), line)
    if info is None:
        console.print(f"[red]No blame information for line {line}[/red]")
        raise click.Abort()

    title = "Uncommitted" if info.uncommitted else info.commit_id
    body = (
        f"[bold]Author:[/bold] {escape(info.author)}\n"
        f"[bold]Date:[/bold] {info.date} {info.time} ({info.humanized_time})\n\n"
        f"{escape(info.message) if info.message else '[dim]No commit message[/dim]'}"
    )
    console.print(Panel(body, title=title, expand=False))


@main.command(name="config")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file")
def show_config(config_path: Optional[str]):
    """Show the effective configuration."""
    config = _load_config_or_exit(config_path, Path.cwd())

    table = Table(title="blame-lens configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    for name, value in config.model_dump(mode="json").items():
        table.add_row(name, repr(value))
    console.print(table)

    if config.all_templates_disabled:
        console.print("[yellow]Warning: all annotation templates are disabled[/yellow]")


if __name__ == "__main__":
    main()
