import logging
from enum import Enum
from typing import List, Optional

from book_manager.book import BookParseError, BookRecord, parse_book_list
from book_manager.services.books_api import BooksAPI

logger = logging.getLogger(__name__)


class LoadState(str, Enum):
    LOADING = "loading"
    ERROR = "ready-with-error"
    READY = "ready-with-data"


class CollectionStore:
    """Authoritative in-memory list of books, replaced wholesale on every successful load."""

    def __init__(self, api: BooksAPI) -> None:
        self.api = api
        self.books: List[BookRecord] = []
        self.state: LoadState = LoadState.LOADING
        self.error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return not self.books

    async def load(self) -> bool:
        """Fetch the full collection. Returns True when the list was refreshed."""
        self.state = LoadState.LOADING
        result = await self.api.list_books()

        if result.status_code == 204 or (result.ok and not result.has_body):
            self._replace([])
            return True

        if not result.ok:
            if result.transport_failed:
                message = result.error
            else:
                message = result.server_message() or f"HTTP error fetching books! Status: {result.status_code}"
            self._fail(message)
            return False

        if not result.body_parsed:
            self._fail("Could not parse book list from server.")
            return False
        try:
            books = parse_book_list(result.payload)
        except BookParseError as e:
            logger.error(f"Invalid book list payload: {e}")
            self._fail("Could not parse book list from server.")
            return False

        self._replace(books)
        return True

    def _replace(self, books: List[BookRecord]) -> None:
        self.books = books
        self.error = None
        self.state = LoadState.READY
        logger.info(f"Loaded {len(books)} book(s)")

    def _fail(self, message: str) -> None:
        logger.error(f"Failed to fetch books: {message}")
        self.error = message
        self.state = LoadState.ERROR
