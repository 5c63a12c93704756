"""CLI entry point for reftagger."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click
from bs4 import BeautifulSoup
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from reftagger.config import Settings
from reftagger.engine.fetch import GraphQLClient
from reftagger.engine.preview import PreviewController, PreviewState
from reftagger.tagging.annotator import PARSER, Reftagger

console = Console(stderr=True)


def _write_or_echo(markup: str, output: str | None) -> None:
    if output:
        Path(output).write_text(markup, encoding="utf-8")
        console.print(f"[green]✓ Output written to {output}[/green]")
    else:
        click.echo(markup)


@click.group()
@click.version_option(version="0.1.0")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Settings file (YAML, default ~/.reftagger/config.yaml)",
)
@click.option("--log-level", default="warning", help="Log level")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, log_level: str):
    """reftagger - tag Quran and Bible citations in HTML."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        ctx.obj = Settings.from_file(config_path)
    except (OSError, ValueError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)


@cli.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Write HTML to file")
@click.option(
    "--version",
    "-V",
    "versions",
    multiple=True,
    help="Translation priority (repeatable, overrides settings)",
)
@click.option(
    "--exclude", "-x", multiple=True, help="Selector whose text is not tagged"
)
@click.pass_obj
def tag(
    settings: Settings,
    input_path: str,
    output: str | None,
    versions: tuple[str, ...],
    exclude: tuple[str, ...],
):
    """Tag citations in an HTML file.

    Example: reftagger tag page.html -o tagged.html -V injil -V quran
    """
    if versions:
        settings.versions = list(versions)
    if exclude:
        settings.exclude = settings.exclude + list(exclude)

    tagger = Reftagger(settings)
    document = BeautifulSoup(Path(input_path).read_text(encoding="utf-8"), PARSER)
    count = tagger.tag(document)

    _write_or_echo(str(document), output)
    console.print(f"[dim]{count} citation(s) tagged[/dim]")


@cli.command()
@click.argument("input_path", metavar="INPUT", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "-o", type=click.Path(), help="Write HTML to file")
@click.pass_obj
def strip(settings: Settings, input_path: str, output: str | None):
    """Remove citation tags from an HTML file."""
    tagger = Reftagger(settings)
    document = BeautifulSoup(Path(input_path).read_text(encoding="utf-8"), PARSER)
    count = tagger.destroy(document)

    _write_or_echo(str(document), output)
    console.print(f"[dim]{count} citation tag(s) removed[/dim]")


@cli.command()
@click.argument("text")
@click.pass_obj
def find(settings: Settings, text: str):
    """List the citations found in TEXT.

    Example: reftagger find "See John 3:16 and Quran 2:255"
    """
    tagger = Reftagger(settings)
    citations = sorted(tagger.find_citations(text), key=lambda c: c.order)

    if not citations:
        console.print("[yellow]No citations found[/yellow]")
        sys.exit(1)

    table = Table(title="Citations")
    table.add_column("Text", style="bold")
    table.add_column("Canon", style="cyan")
    table.add_column("Book")
    table.add_column("Chapter", justify="right")
    table.add_column("Verses")
    table.add_column("Version", style="green")
    table.add_column("Permalink", style="dim")

    for citation in citations:
        table.add_row(
            escape(citation.text),
            citation.type,
            citation.book or "",
            str(citation.chapter),
            citation.verse_spec,
            citation.version or "[yellow]none[/yellow]",
            tagger.source(citation.type).permalink(citation),
        )

    Console().print(table)


@cli.command()
@click.argument("text")
@click.pass_obj
def preview(settings: Settings, text: str):
    """Fetch and show the excerpt for the first citation in TEXT.

    Example: reftagger preview "Quran 1:1-3"
    """
    tagger = Reftagger(settings)
    citations = sorted(tagger.find_citations(text), key=lambda c: c.order)
    if not citations:
        console.print("[yellow]No citations found[/yellow]")
        sys.exit(1)

    client = GraphQLClient(settings.endpoint, timeout=settings.fetch_timeout)
    controller = PreviewController(tagger.sources, client, settings)
    result = asyncio.run(controller.open(citations[0]))

    if result is None or result.state != PreviewState.READY:
        color = "red" if result and result.state == PreviewState.FAILED else "yellow"
        console.print(f"[{color}]{result.message if result else 'No result'}[/{color}]")
        sys.exit(1)

    title = " · ".join(filter(None, [result.canon_name, result.chapter_name])) or None
    Console().print(
        Panel(
            f"[bold]{escape(result.reference)}[/bold]\n{escape(result.html)}\n\n"
            f"[dim]{result.permalink}[/dim]",
            title=title,
        )
    )


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind host")
@click.option("--port", default=8000, help="Bind port")
def serve(host: str, port: int):
    """Start the API server."""
    import uvicorn

    console.print(f"[bold blue]Starting reftagger API at http://{host}:{port}[/bold blue]")
    uvicorn.run("reftagger.api.main:app", host=host, port=port)


if __name__ == "__main__":
    cli()
