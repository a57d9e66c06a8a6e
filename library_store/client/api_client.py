import httpx
from typing import Any

from library_store.core.config import settings
from library_store.core.logging import get_logger
from library_store.schemas.book import BookRead

logger = get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response (or transport failure) from the books API."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code: int | None = status_code


class BooksApiClient:
    """Thin synchronous client for the /books endpoints.

    Any ``httpx.Client`` can be injected; FastAPI's ``TestClient`` is one.
    """

    def __init__(self, client: httpx.Client | None = None):
        self._owns_client: bool = client is None
        self._client: httpx.Client = client or httpx.Client(
            base_url=settings.API_BASE_URL,
            timeout=settings.CLIENT_TIMEOUT,
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "BooksApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _request(self, method: str, url: str, failure: str, **kwargs: Any) -> Any:
        try:
            response = self._client.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise ApiError(f"{failure}: {e}") from e

        if response.is_error:
            message = failure
            try:
                body = response.json()
            except ValueError:
                body = None
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
            raise ApiError(message, status_code=response.status_code)
        return response.json()

    def list_books(self) -> list[BookRead]:
        data = self._request("GET", "/books", "Failed to fetch books")
        return [BookRead.model_validate(item) for item in data]

    def get_book(self, book_id: int) -> BookRead:
        data = self._request("GET", f"/books/{book_id}", "Failed to fetch book")
        return BookRead.model_validate(data)

    def create_book(self, payload: dict[str, Any]) -> BookRead:
        data = self._request("POST", "/books", "Failed to create book", json=payload)
        return BookRead.model_validate(data["newBook"])

    def update_book(self, book_id: int, payload: dict[str, Any]) -> BookRead:
        data = self._request("PUT", f"/books/{book_id}", "Failed to update book", json=payload)
        return BookRead.model_validate(data)

    def delete_book(self, book_id: int) -> str:
        data = self._request("DELETE", f"/books/{book_id}", "Failed to delete book")
        return str(data.get("message", ""))
