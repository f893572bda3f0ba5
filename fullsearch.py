"""fullsearch CLI: the command-line front end to the keyword index.

Six commands: index, index-dir, remove, search, tokenize, stats.
Uses typer for argument parsing and rich for formatted terminal output.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import jieba
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from searchcore.config import Settings
from searchcore.indexer import InvertedIndex, index_directory
from searchcore.segmenter import SegmenterInitError
from searchcore.store import IndexStore
from searchcore.tokenizer import Tokenizer, load_stopwords

app = typer.Typer(help="fullsearch: keyword inverted index with Chinese segmentation.")
console = Console()

SETTINGS = Settings.from_env()


def _db_option():
    return typer.Option(SETTINGS.db_path, "--db", help="Path to the SQLite index")


def _stopwords_option():
    return typer.Option(
        SETTINGS.stopwords_path, "--stopwords", help="Line-delimited stopword list"
    )


def _get_tokenizer(stopwords_path: str | None) -> Tokenizer:
    return Tokenizer(stopwords=load_stopwords(stopwords_path))


def _get_index(db_path: str, stopwords_path: str | None) -> InvertedIndex:
    return InvertedIndex(IndexStore(db_path), _get_tokenizer(stopwords_path))


def _fail_segmenter(err: SegmenterInitError) -> NoReturn:
    console.print(f"[red]Error: {err}[/red]")
    raise typer.Exit(code=2)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
):
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    jieba.setLogLevel(logging.DEBUG if verbose else logging.WARNING)


# ── index ───────────────────────────────────────────────────────────


@app.command()
def index(
    document_id: str = typer.Argument(..., help="Identifier of the document"),
    text: str = typer.Argument(None, help="Document text"),
    file: Path = typer.Option(None, "--file", "-f", help="Read document text from a file"),
    db: str = _db_option(),
    stopwords: str = _stopwords_option(),
):
    """Index (or re-index) a single document."""
    if file is not None:
        if not file.is_file():
            console.print(f"[red]Error: file not found: {file}[/red]")
            raise typer.Exit(code=1)
        text = file.read_text(encoding="utf-8")
    if text is None:
        console.print("[red]Error: give TEXT or --file[/red]")
        raise typer.Exit(code=1)

    idx = _get_index(db, stopwords)
    try:
        keywords = idx.index_document(document_id, text)
    except SegmenterInitError as e:
        _fail_segmenter(e)
    finally:
        idx.store.close()

    if keywords:
        console.print(
            f"[green]✓[/green] Indexed [cyan]{document_id}[/cyan] "
            f"with {len(keywords)} keywords"
        )
    else:
        console.print(
            f"[yellow]{document_id} produced no keywords; it is no longer indexed[/yellow]"
        )


# ── index-dir ───────────────────────────────────────────────────────


@app.command("index-dir")
def index_dir(
    directory: Path = typer.Argument(..., help="Directory to index recursively"),
    pattern: str = typer.Option("*.md", "--pattern", help="Glob for files to index"),
    db: str = _db_option(),
    stopwords: str = _stopwords_option(),
):
    """Index every matching file in a directory, keyed by relative path."""
    if not directory.is_dir():
        console.print(f"[red]Error: not a directory: {directory}[/red]")
        raise typer.Exit(code=1)

    idx = _get_index(db, stopwords)
    try:
        with console.status("[bold blue]Indexing documents..."):
            summary = index_directory(idx, str(directory), pattern)
    except SegmenterInitError as e:
        _fail_segmenter(e)
    finally:
        idx.store.close()

    table = Table(title="Indexing Summary")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green", justify="right")
    table.add_row("Files", str(summary["documents"]))
    table.add_row("Indexed", str(summary["indexed"]))
    table.add_row("No keywords", str(summary["unindexed"]))
    table.add_row("Skipped", str(summary["skipped"]))
    console.print(table)


# ── remove ──────────────────────────────────────────────────────────


@app.command()
def remove(
    document_id: str = typer.Argument(..., help="Identifier of the document"),
    db: str = _db_option(),
):
    """Remove a document from the index."""
    with IndexStore(db) as store:
        removed = InvertedIndex(store).remove_document(document_id)
    console.print(f"Removed [cyan]{document_id}[/cyan] ({removed} keyword rows)")


# ── search ──────────────────────────────────────────────────────────


@app.command()
def search(
    query: str = typer.Argument(..., help="Search text"),
    db: str = _db_option(),
    stopwords: str = _stopwords_option(),
):
    """List documents containing any keyword of the query."""
    idx = _get_index(db, stopwords)
    try:
        results = idx.search(query)
    except SegmenterInitError as e:
        _fail_segmenter(e)
    finally:
        idx.store.close()

    console.print(f'\n[bold]Query:[/bold] "{query}"')
    if not results:
        console.print("[dim]No matching documents[/dim]")
        return

    table = Table()
    table.add_column("#", style="dim", width=4)
    table.add_column("Document", style="cyan", min_width=30)
    for i, doc_id in enumerate(sorted(results), 1):
        table.add_row(str(i), doc_id)
    console.print(table)
    console.print(f"\n{len(results)} documents matched")


# ── tokenize ────────────────────────────────────────────────────────


@app.command()
def tokenize(
    text: str = typer.Argument(..., help="Text to tokenize"),
    stopwords: str = _stopwords_option(),
):
    """Show the keyword set a text would be indexed under."""
    try:
        keywords = _get_tokenizer(stopwords).tokenize(text)
    except SegmenterInitError as e:
        _fail_segmenter(e)

    if not keywords:
        console.print("[dim]No keywords[/dim]")
        return
    console.print(" ".join(sorted(keywords)))


# ── stats ───────────────────────────────────────────────────────────


@app.command()
def stats(db: str = _db_option()):
    """Show index size."""
    with IndexStore(db) as store:
        counts = store.stats()

    console.print(
        Panel(
            f"[bold]Documents:[/bold] {counts['documents']}  |  "
            f"[bold]Keywords:[/bold] {counts['keywords']}  |  "
            f"[bold]Entries:[/bold] {counts['entries']}",
            title=db,
        )
    )


if __name__ == "__main__":
    app()
