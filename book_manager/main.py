import asyncio
import logging
from typing import Awaitable, Callable, Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from book_manager.book import BookRecord
from book_manager.client import BookManagerClient
from book_manager.config import Settings, get_settings
from book_manager.controller import ConfirmCallback
from book_manager.store import LoadState
from book_manager.utils.ui_helpers import (
    print_list_result,
    print_load_error,
    print_status,
    set_output_mode,
)

console = Console()

app = typer.Typer(help="Book Manager CLI")


def _ask_confirmation(prompt: str) -> bool:
    return Confirm.ask(prompt, default=False)


def _always_confirm(prompt: str) -> bool:
    return True


def _run(
    settings: Settings,
    action: Callable[[BookManagerClient], Awaitable[None]],
    confirm: Optional[ConfirmCallback] = None,
) -> None:
    async def runner() -> None:
        async with BookManagerClient(settings, confirm=confirm or _ask_confirmation) as client:
            await action(client)

    asyncio.run(runner())


def _print_collection(client: BookManagerClient) -> None:
    if client.store.state is LoadState.ERROR:
        print_load_error(client.store.error or "unknown error")
    else:
        print_list_result(client.store.books)


async def _find(client: BookManagerClient, isbn: str) -> Optional[BookRecord]:
    """Load the list and return the record with ``isbn``, printing why when there is none."""
    if not await client.store.load():
        print_load_error(client.store.error or "unknown error")
        return None
    record = next((b for b in client.store.books if b.isbn == isbn), None)
    if record is None:
        print(f"Book with ISBN {isbn} not found.")
    return record


@app.callback()
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        help="Base URL of the books REST API (overrides BOOK_API_BASE_URL)",
    ),
):
    """Global CLI options (output mode, API location)."""
    settings = get_settings(api_base_url=base_url)
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING))
    set_output_mode(output or settings.output_mode)
    ctx.obj = settings


@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books."""
    async def action(client: BookManagerClient) -> None:
        await client.store.load()
        _print_collection(client)

    _run(ctx.obj, action)


@app.command("add")
def cli_add(ctx: typer.Context, isbn: str, title: str, author: str):
    """Add a new book."""
    async def action(client: BookManagerClient) -> None:
        client.session.set_isbn(isbn)
        client.session.set_title(title)
        client.session.set_author(author)
        await client.controller.submit()
        print_status(client.status.message)

    _run(ctx.obj, action)


@app.command("edit")
def cli_edit(
    ctx: typer.Context,
    isbn: str,
    title: Optional[str] = typer.Option(None, "--title", "-t", help="New title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="New author"),
):
    """Update the title and/or author of a book. The ISBN cannot change."""
    async def action(client: BookManagerClient) -> None:
        record = await _find(client, isbn)
        if record is None:
            return
        client.controller.edit(record)
        print_status(client.status.message)
        if title is not None:
            client.session.set_title(title)
        if author is not None:
            client.session.set_author(author)
        await client.controller.submit()
        print_status(client.status.message)

    _run(ctx.obj, action)


@app.command("remove")
def cli_remove(
    ctx: typer.Context,
    isbn: str,
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
):
    """Delete a book by ISBN."""
    async def action(client: BookManagerClient) -> None:
        record = await _find(client, isbn)
        if record is None:
            return
        await client.controller.remove(record.isbn, record.title)
        if client.status.message is None:
            print("Deletion cancelled.")
        else:
            print_status(client.status.message)

    _run(ctx.obj, action, confirm=_always_confirm if yes else None)


def _render_menu(client: BookManagerClient) -> None:
    menu_items = [
        ("1", "List books", "📚"),
        ("2", client.session.submit_label, "➕"),
        ("3", "Edit book", "✏️"),
        ("4", "Delete book", "🗑️"),
        ("5", "Refresh book list", "🔄"),
        ("6", "Cancel edit", "↩️"),
        ("0", "Quit", "🚪"),
    ]

    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in menu_items:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")

    console.print(Panel(
        table,
        title=f"{client.settings.app_name} - {client.session.form_title}",
        border_style="cyan",
        box=box.HEAVY,
        padding=(1, 2),
    ))


def _prompt_draft(client: BookManagerClient) -> None:
    session = client.session
    if session.is_editing:
        console.print(f"[dim]ISBN: {escape(session.isbn)} (cannot be changed)[/]")
    else:
        session.set_isbn(Prompt.ask("ISBN", default=session.isbn or None) or "")
    session.set_title(Prompt.ask("Title", default=session.title or None) or "")
    session.set_author(Prompt.ask("Author", default=session.author or None) or "")


async def _shell(client: BookManagerClient) -> None:
    await client.store.load()
    while True:
        _render_menu(client)
        print_status(client.status.message)
        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "6", "0"], default="1")

        if choice == "1":
            _print_collection(client)
        elif choice == "2":
            _prompt_draft(client)
            await client.controller.submit()
        elif choice == "3":
            isbn = Prompt.ask("ISBN of the book to edit").strip()
            record = next((b for b in client.store.books if b.isbn == isbn), None)
            if record is None:
                console.print(f"[yellow]Book with ISBN {escape(isbn)} not found.[/]")
                continue
            client.controller.edit(record)
            print_status(client.status.message)
            _prompt_draft(client)
            await client.controller.submit()
        elif choice == "4":
            isbn = Prompt.ask("ISBN of the book to delete").strip()
            record = next((b for b in client.store.books if b.isbn == isbn), None)
            if record is None:
                console.print(f"[yellow]Book with ISBN {escape(isbn)} not found.[/]")
                continue
            await client.controller.remove(record.isbn, record.title)
        elif choice == "5":
            await client.controller.refresh()
            _print_collection(client)
        elif choice == "6":
            client.controller.cancel()
        elif choice == "0":
            console.print("[green]Goodbye![/]")
            break


@app.command("shell")
def cli_shell(ctx: typer.Context):
    """Interactive menu keeping one session (list, form and status) alive."""
    _run(ctx.obj, _shell)


if __name__ == "__main__":
    app()
