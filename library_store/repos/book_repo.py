from sqlalchemy.orm import Session
from library_store.models.book import Book, utcnow
from library_store.schemas.book import BookCreate
from sqlalchemy import select, update, delete
from sqlalchemy.engine import CursorResult
from typing import cast


class BookRepository:
    @staticmethod
    # Create a new book
    def create(db: Session, data: BookCreate) -> Book:
        book = Book(**data.model_dump())
        db.add(book)
        db.commit()
        db.refresh(book)
        return book

    @staticmethod
    # List books, newest first
    def list(db: Session) -> list[Book]:
        stmt = select(Book).order_by(Book.created_at.desc(), Book.id.desc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get a book by ID
    def get(db: Session, book_id: int) -> Book | None:
        stmt = select(Book).where(Book.id == book_id)
        return db.scalars(stmt).first()

    @staticmethod
    # Update the supplied columns of a book
    def update(db: Session, book_id: int, values: dict[str, object]) -> Book | None:
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .values(**values, updated_at=utcnow())
            .execution_options(synchronize_session=False)
        )
        _ = db.execute(stmt)
        db.commit()
        db.expire_all()
        return BookRepository.get(db, book_id)

    @staticmethod
    # Delete a book, returns whether a row was removed
    def delete(db: Session, book_id: int) -> bool:
        result = cast(CursorResult[object], db.execute(delete(Book).where(Book.id == book_id)))
        db.commit()
        return result.rowcount == 1
