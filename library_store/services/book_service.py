from __future__ import annotations
import logging
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from library_store.schemas.book import BookCreate, BookUpdate
from library_store.repos.book_repo import BookRepository
from library_store.models.book import Book

logger = logging.getLogger(__name__)

# SQLite INTEGER PRIMARY KEY range; anything outside cannot exist
MAX_BOOK_ID = 2**63 - 1


class BookNotFoundError(LookupError):
    def __init__(self, book_id: int):
        super().__init__("Book not found")
        self.book_id: int = book_id


class DuplicateIsbnError(ValueError):
    def __init__(self, isbn: str | None = None):
        super().__init__("ISBN already exists")
        self.isbn: str | None = isbn


class BookService:
    @staticmethod
    # List books
    def list_books(db: Session) -> list[Book]:
        return BookRepository.list(db)

    @staticmethod
    # Get book
    def get_book(db: Session, book_id: int) -> Book:
        if not 1 <= book_id <= MAX_BOOK_ID:
            raise BookNotFoundError(book_id)
        book = BookRepository.get(db, book_id)
        if book is None:
            raise BookNotFoundError(book_id)
        return book

    @staticmethod
    # Create book
    def create_book(db: Session, data: BookCreate) -> Book:
        try:
            book = BookRepository.create(db, data)
        except IntegrityError:
            db.rollback()
            raise DuplicateIsbnError(data.isbn)
        logger.info("Created book %d (%s)", book.id, book.title)
        return book

    @staticmethod
    # Update book, keeping fields that were not supplied
    def update_book(db: Session, book_id: int, data: BookUpdate) -> Book:
        _ = BookService.get_book(db, book_id)

        changes = data.changes()
        try:
            book = BookRepository.update(db, book_id, changes)
        except IntegrityError:
            db.rollback()
            raise DuplicateIsbnError(data.isbn)
        if book is None:
            raise BookNotFoundError(book_id)
        logger.info("Updated book %d fields=%s", book_id, sorted(changes))
        return book

    @staticmethod
    # Delete book
    def delete_book(db: Session, book_id: int) -> None:
        _ = BookService.get_book(db, book_id)
        if not BookRepository.delete(db, book_id):
            raise BookNotFoundError(book_id)
        logger.info("Deleted book %d", book_id)
