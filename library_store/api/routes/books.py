from fastapi import APIRouter, Body, Depends, HTTPException
from sqlalchemy.orm import Session
from library_store.db.session import get_db
from library_store.services.book_service import (
    BookService,
    BookNotFoundError,
    DuplicateIsbnError,
)
from library_store.schemas.book import (
    BookCreate,
    BookCreated,
    BookRead,
    BookUpdate,
    MessageResponse,
)
from typing import Annotated
from starlette.status import (
    HTTP_201_CREATED,
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
)
router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=list[BookRead])
def list_books(db: Annotated[Session, Depends(get_db)]):
    return BookService.list_books(db)


@router.get("/{book_id}", response_model=BookRead)
def get_book(book_id: int, db: Annotated[Session, Depends(get_db)]):
    try:
        return BookService.get_book(db, book_id)
    except BookNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e))


@router.post("", response_model=BookCreated, status_code=HTTP_201_CREATED)
def create_book(
    data: BookCreate,
    db: Annotated[Session, Depends(get_db)],
):
    try:
        book = BookService.create_book(db, data)
    except DuplicateIsbnError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e))
    return BookCreated(newBook=BookRead.model_validate(book))


@router.put("/{book_id}", response_model=BookRead)
def update_book(
    book_id: int,
    db: Annotated[Session, Depends(get_db)],
    data: Annotated[BookUpdate, Body()] = BookUpdate(),
):
    try:
        return BookService.update_book(db, book_id, data)
    except BookNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e))
    except DuplicateIsbnError as e:
        raise HTTPException(status_code=HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{book_id}", response_model=MessageResponse)
def delete_book(book_id: int, db: Annotated[Session, Depends(get_db)]):
    try:
        BookService.delete_book(db, book_id)
    except BookNotFoundError as e:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail=str(e))
    return MessageResponse(message="Book deleted successfully")
