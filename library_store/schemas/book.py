from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import ClassVar
from datetime import datetime


def _required_text(v: object) -> object:
    if isinstance(v, str):
        v = v.strip()
        if not v:
            raise ValueError("value cannot be empty")
    return v


def _optional_text(v: object) -> object:
    # Blank strings from forms are stored as NULL so they never collide on isbn
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return v


# Book create schema
class BookCreate(BaseModel):
    title: str
    author: str
    isbn: str | None = None
    genre: str | None = None
    publication_year: int | None = None
    available_copies: int = Field(default=1, ge=0)
    total_copies: int = Field(default=1, ge=0)

    @field_validator("title", "author", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> object:
        return _required_text(v)

    @field_validator("isbn", "genre", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        return _optional_text(v)

    @field_validator("available_copies", "total_copies", mode="before")
    @classmethod
    def default_when_null(cls, v: object) -> object:
        return 1 if v is None else v


# Book update schema: absent or null fields keep their stored value
class BookUpdate(BaseModel):
    title: str | None = None
    author: str | None = None
    isbn: str | None = None
    genre: str | None = None
    publication_year: int | None = None
    available_copies: int | None = Field(default=None, ge=0)
    total_copies: int | None = Field(default=None, ge=0)

    @field_validator("title", "author", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> object:
        return _required_text(v)

    @field_validator("isbn", "genre", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        return _optional_text(v)

    def changes(self) -> dict[str, object]:
        """Fields supplied with a non-null value."""
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


# Book read schema
class BookRead(BaseModel):
    id: int
    title: str
    author: str
    isbn: str | None = None
    genre: str | None = None
    publication_year: int | None = None
    available_copies: int
    total_copies: int
    created_at: datetime
    updated_at: datetime

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)


# Body returned by POST /books
class BookCreated(BaseModel):
    newBook: BookRead
    text: str = "Book created successfully"


class MessageResponse(BaseModel):
    message: str
