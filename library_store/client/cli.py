from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from library_store.client.api_client import BooksApiClient
from library_store.client.state import InventoryState
from library_store.core.config import settings
from library_store.schemas.book import BookRead

app = typer.Typer(help="Library Management System")
console = Console()


def make_api() -> BooksApiClient:
    return BooksApiClient()


def _load_state() -> InventoryState:
    state = InventoryState(make_api())
    with console.status("[bold green]Loading books..."):
        state.fetch_books()
    _exit_on_error(state)
    return state


def _exit_on_error(state: InventoryState) -> None:
    if state.error:
        console.print(Panel.fit(f"[bold red]Error:[/] {escape(state.error)}", border_style="red"))
        state.api.close()
        raise typer.Exit(code=1)
    if state.form_errors:
        for problem in state.form_errors:
            console.print(f"[red]- {escape(problem)}[/]")
        state.api.close()
        raise typer.Exit(code=2)


def _print_book(book: BookRead, title: str) -> None:
    lines = [f"[bold]Title:[/] {escape(book.title)}", f"[bold]Author:[/] {escape(book.author)}"]
    if book.isbn:
        lines.append(f"[bold]ISBN:[/] {escape(book.isbn)}")
    if book.genre:
        lines.append(f"[bold]Genre:[/] {escape(book.genre)}")
    if book.publication_year:
        lines.append(f"[bold]Year:[/] {book.publication_year}")
    lines.append(f"[bold]Available:[/] {book.available_copies}/{book.total_copies}")
    console.print(Panel.fit("\n".join(lines), title=title, border_style="green"))


@app.command("list")
def list_books():
    """List the inventory, newest first."""
    state = _load_state()
    state.api.close()

    if not state.books:
        console.print("[yellow]No books found. Add your first book![/]")
        return

    table = Table(
        title=f"Book Inventory ({len(state.books)} books)",
        box=box.SIMPLE_HEAVY,
        header_style="bold cyan",
    )
    table.add_column("ID", justify="right", style="magenta")
    table.add_column("Title")
    table.add_column("Author")
    table.add_column("ISBN", no_wrap=True)
    table.add_column("Genre")
    table.add_column("Year", justify="right")
    table.add_column("Available", justify="right")

    for book in state.books:
        table.add_row(
            str(book.id),
            escape(book.title),
            escape(book.author),
            escape(book.isbn or ""),
            escape(book.genre or ""),
            str(book.publication_year or ""),
            f"{book.available_copies}/{book.total_copies}",
        )
    console.print(table)


@app.command("add")
def add_book(
    title: str = typer.Option(..., "--title", "-t", prompt=True, help="Book title"),
    author: str = typer.Option(..., "--author", "-a", prompt=True, help="Book author"),
    isbn: str = typer.Option("", "--isbn", help="ISBN, must be unique"),
    genre: str = typer.Option("", "--genre", help="Genre"),
    year: str = typer.Option("", "--year", help="Publication year (1000-2099)"),
    available: str = typer.Option("1", "--available", help="Available copies"),
    total: str = typer.Option("1", "--total", help="Total copies"),
):
    """Add a new book."""
    state = _load_state()
    state.open_form()
    state.form = state.form.model_copy(update={
        "title": title,
        "author": author,
        "isbn": isbn,
        "genre": genre,
        "publication_year": year,
        "available_copies": available,
        "total_copies": total,
    })
    ok = state.submit()
    _exit_on_error(state)
    state.api.close()
    if ok:
        _print_book(state.books[0], "Book created successfully")


@app.command("edit")
def edit_book(
    book_id: int = typer.Argument(..., help="ID of the book to edit"),
    title: Optional[str] = typer.Option(None, "--title", "-t"),
    author: Optional[str] = typer.Option(None, "--author", "-a"),
    isbn: Optional[str] = typer.Option(None, "--isbn"),
    genre: Optional[str] = typer.Option(None, "--genre"),
    year: Optional[str] = typer.Option(None, "--year"),
    available: Optional[str] = typer.Option(None, "--available"),
    total: Optional[str] = typer.Option(None, "--total"),
):
    """Edit a book; options left out keep their current value."""
    state = _load_state()
    book = state.find(book_id)
    if book is None:
        console.print(f"[yellow]Book {book_id} not found.[/]")
        state.api.close()
        raise typer.Exit(code=1)

    state.edit(book)
    supplied = {
        "title": title,
        "author": author,
        "isbn": isbn,
        "genre": genre,
        "publication_year": year,
        "available_copies": available,
        "total_copies": total,
    }
    state.form = state.form.model_copy(update={k: v for k, v in supplied.items() if v is not None})
    ok = state.submit()
    _exit_on_error(state)
    state.api.close()
    if ok:
        updated = state.find(book_id)
        if updated is not None:
            _print_book(updated, "Book updated")


@app.command("delete")
def delete_book(
    book_id: int = typer.Argument(..., help="ID of the book to delete"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete a book after confirmation."""
    state = _load_state()
    book = state.find(book_id)
    if book is None:
        console.print(f"[yellow]Book {book_id} not found.[/]")
        state.api.close()
        raise typer.Exit(code=1)

    _print_book(book, "Book to delete")
    deleted = state.delete_book(
        book_id, confirm=lambda prompt: yes or Confirm.ask(prompt, default=False)
    )
    _exit_on_error(state)
    state.api.close()
    if deleted:
        console.print(f"[green]{escape(book.title)} deleted.[/]")
    else:
        console.print("[blue]Delete cancelled.[/]")


@app.command("serve")
def serve(
    host: str = typer.Option(settings.HOST, "--host"),
    port: int = typer.Option(settings.PORT, "--port"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the API server."""
    import uvicorn

    uvicorn.run("library_store.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
