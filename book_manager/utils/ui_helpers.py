import json
import os
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from book_manager.book import BookRecord
from book_manager.status import StatusKind, StatusMessage

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOK_CLIENT_OUTPUT"

STATUS_STYLES = {
    StatusKind.ERROR: "red",
    StatusKind.SUCCESS: "green",
    StatusKind.INFO: "blue",
}

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_list_result(books: List[BookRecord]) -> None:
    """Print the book list in the current output mode.
    - plain: 'ISBN - Title by Author' lines, or 'No books found.'
    - json: JSON array of isbn, title, author
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print("No books found.")
        return

    if mode == "rich":
        table = Table(title="📚 Book List", show_lines=True, header_style="bold cyan")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        for b in books:
            table.add_row(escape(b.isbn), escape(b.title), escape(b.author))
        _console.print(table)
    else:
        for b in books:
            print(f"{b.isbn} - {b.title} by {b.author}")


def print_load_error(error: str) -> None:
    if get_output_mode() == "rich":
        _console.print(f"[bold red]Error fetching books:[/] {escape(error)}")
    else:
        print(f"Error fetching books: {error}")


def print_status(message: Optional[StatusMessage]) -> None:
    """Print the status message; nothing is printed once it has been cleared."""
    if message is None:
        return
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps({"status": message.kind.value, "message": message.text}, ensure_ascii=False))
    elif mode == "rich":
        _console.print(f"[{STATUS_STYLES[message.kind]}]{escape(message.text)}[/]")
    else:
        print(message.text)
