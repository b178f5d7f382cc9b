from typing import Optional

import httpx

from book_manager.config import Settings, get_settings
from book_manager.controller import ConfirmCallback, SyncController
from book_manager.edit_session import EditSession
from book_manager.services.books_api import BooksAPI
from book_manager.services.http_client import BooksHTTPClient
from book_manager.status import StatusNotifier
from book_manager.store import CollectionStore


def _decline(prompt: str) -> bool:
    return False


class BookManagerClient:
    """One client session: store, edit session, status and controller sharing one HTTP client.

    Owned by whatever boots the client and handed to presentation code by
    reference. Use as an async context manager so the HTTP client is closed.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        confirm: Optional[ConfirmCallback] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.http = BooksHTTPClient(transport=transport)
        self.api = BooksAPI(self.http, self.settings)
        self.status = StatusNotifier()
        self.store = CollectionStore(self.api)
        self.session = EditSession(self.status)
        self.controller = SyncController(
            self.api,
            self.store,
            self.session,
            self.status,
            confirm or _decline,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
