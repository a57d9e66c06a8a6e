from collections.abc import Callable
from typing import Any
from pydantic import BaseModel

from library_store.client.api_client import ApiError, BooksApiClient
from library_store.core.logging import get_logger
from library_store.schemas.book import BookRead

logger = get_logger(__name__)

DELETE_PROMPT = "Are you sure you want to delete this book?"

MIN_PUBLICATION_YEAR = 1000
MAX_PUBLICATION_YEAR = 2099


def _to_int(value: str) -> int | None:
    try:
        return int(value.strip())
    except (AttributeError, ValueError):
        return None


def _default_one(value: int | None) -> int:
    return 1 if value is None else value


# Form field values, kept as entered text
class BookForm(BaseModel):
    title: str = ""
    author: str = ""
    isbn: str = ""
    genre: str = ""
    publication_year: str = ""
    available_copies: str = "1"
    total_copies: str = "1"

    @classmethod
    def from_book(cls, book: BookRead) -> "BookForm":
        return cls(
            title=book.title,
            author=book.author,
            isbn=book.isbn or "",
            genre=book.genre or "",
            publication_year=str(book.publication_year) if book.publication_year else "",
            available_copies=str(book.available_copies),
            total_copies=str(book.total_copies),
        )

    def validate_fields(self) -> list[str]:
        """Input constraints the form enforces before submitting."""
        problems: list[str] = []
        if not self.title.strip():
            problems.append("Title is required")
        if not self.author.strip():
            problems.append("Author is required")

        if self.publication_year.strip():
            year = _to_int(self.publication_year)
            if year is None or not MIN_PUBLICATION_YEAR <= year <= MAX_PUBLICATION_YEAR:
                problems.append(
                    f"Publication year must be between {MIN_PUBLICATION_YEAR} and {MAX_PUBLICATION_YEAR}"
                )

        available = _to_int(self.available_copies)
        if available is None or available < 0:
            problems.append("Available copies must be 0 or more")
        total = _to_int(self.total_copies)
        if total is None or total < 1:
            problems.append("Total copies must be 1 or more")
        return problems

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "author": self.author,
            "isbn": self.isbn,
            "genre": self.genre,
            "publication_year": _to_int(self.publication_year) if self.publication_year else None,
            "available_copies": _default_one(_to_int(self.available_copies)),
            "total_copies": _default_one(_to_int(self.total_copies)),
        }


class InventoryState:
    """
    In-memory view of the inventory: the book list, loading/error flags
    and the add/edit form. Mutations patch the local list instead of
    re-fetching it.
    """

    def __init__(self, api: BooksApiClient):
        self.api: BooksApiClient = api
        self.books: list[BookRead] = []
        self.loading: bool = True
        self.error: str | None = None
        self.show_form: bool = False
        self.editing_book: BookRead | None = None
        self.form: BookForm = BookForm()
        self.form_errors: list[str] = []

    def fetch_books(self) -> None:
        self.loading = True
        try:
            self.books = self.api.list_books()
        except ApiError as e:
            self.error = str(e)
        finally:
            self.loading = False

    def open_form(self) -> None:
        self.form = BookForm()
        self.editing_book = None
        self.show_form = True

    def edit(self, book: BookRead) -> None:
        self.form = BookForm.from_book(book)
        self.editing_book = book
        self.show_form = True

    def reset_form(self) -> None:
        self.form = BookForm()
        self.form_errors = []
        self.editing_book = None
        self.show_form = False
        self.error = None

    def submit(self) -> bool:
        self.form_errors = self.form.validate_fields()
        if self.form_errors:
            return False

        payload = self.form.to_payload()
        if self.editing_book is not None:
            return self._update_book(self.editing_book.id, payload)
        return self._create_book(payload)

    def _create_book(self, payload: dict[str, Any]) -> bool:
        try:
            book = self.api.create_book(payload)
        except ApiError as e:
            self.error = str(e)
            return False
        self.books = [book, *self.books]
        self.reset_form()
        return True

    def _update_book(self, book_id: int, payload: dict[str, Any]) -> bool:
        try:
            updated = self.api.update_book(book_id, payload)
        except ApiError as e:
            self.error = str(e)
            return False
        self.books = [updated if b.id == book_id else b for b in self.books]
        self.reset_form()
        return True

    def delete_book(self, book_id: int, confirm: Callable[[str], bool]) -> bool:
        if not confirm(DELETE_PROMPT):
            return False
        try:
            _ = self.api.delete_book(book_id)
        except ApiError as e:
            self.error = str(e)
            return False
        self.books = [b for b in self.books if b.id != book_id]
        logger.info("Removed book %d from inventory view", book_id)
        return True

    def find(self, book_id: int) -> BookRead | None:
        return next((b for b in self.books if b.id == book_id), None)
