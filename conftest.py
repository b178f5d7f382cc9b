import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from book_manager.client import BookManagerClient
from book_manager.config import Settings

BASE_URL = "http://books.test/api/"
LIST_URL = BASE_URL + "books"


def item_url(isbn: str) -> str:
    return BASE_URL.rstrip("/") + "/" + isbn


class FakeBookService:
    """In-memory stand-in for the books REST API, served through httpx.MockTransport."""

    def __init__(self, books: Optional[List[Dict[str, str]]] = None):
        self.books: List[Dict[str, str]] = [dict(b) for b in books or []]
        self.requests: List[httpx.Request] = []
        self._overrides: Dict[Tuple[str, str], Tuple[int, Dict[str, Any]]] = {}

    def respond(self, method: str, url: str, status_code: int, **kwargs) -> None:
        """Force the response for ``method url`` (kwargs go to httpx.Response)."""
        self._overrides[(method, url)] = (status_code, kwargs)

    @property
    def calls(self) -> List[Tuple[str, str]]:
        return [(r.method, str(r.url)) for r in self.requests]

    def body(self, index: int) -> Any:
        return json.loads(self.requests[index].content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        forced = self._overrides.get((request.method, url))
        if forced is not None:
            status_code, kwargs = forced
            return httpx.Response(status_code, **kwargs)

        if request.method == "GET" and url == LIST_URL:
            return httpx.Response(200, json=self.books)
        if request.method == "POST" and url == BASE_URL:
            data = json.loads(request.content)
            if self._find(data["isbn"]) is not None:
                return httpx.Response(409, json={"error": "Book already exists"})
            self.books.append(data)
            return httpx.Response(201, json=data)

        isbn = url.rsplit("/", 1)[-1]
        index = self._find(isbn)
        if request.method == "PUT":
            if index is None:
                return httpx.Response(404, json={"message": "Book not found"})
            self.books[index] = json.loads(request.content)
            return httpx.Response(200, json=self.books[index])
        if request.method == "DELETE":
            if index is None:
                return httpx.Response(404)
            del self.books[index]
            return httpx.Response(204)
        return httpx.Response(405)

    def _find(self, isbn: str) -> Optional[int]:
        for i, book in enumerate(self.books):
            if book["isbn"] == isbn:
                return i
        return None


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # CLI output mode is stored in the environment; keep tests isolated
    monkeypatch.setenv("BOOK_CLIENT_OUTPUT", "plain")


@pytest.fixture
def settings():
    return Settings(api_base_url=BASE_URL, api_list_path="books")


@pytest.fixture
def service():
    return FakeBookService([
        {"isbn": "111", "title": "A", "author": "X"},
        {"isbn": "222", "title": "Dune", "author": "Frank Herbert"},
    ])


@pytest.fixture
def make_client(service, settings):
    def factory(confirm=None):
        return BookManagerClient(
            settings,
            confirm=confirm,
            transport=httpx.MockTransport(service.handler),
        )
    return factory
