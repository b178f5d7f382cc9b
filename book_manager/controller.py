import logging
from typing import Callable

from book_manager.book import BookRecord
from book_manager.edit_session import DraftValidationError, EditSession
from book_manager.services.books_api import BooksAPI
from book_manager.services.http_client import ApiResult
from book_manager.status import StatusNotifier
from book_manager.store import CollectionStore

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]


def describe_failure(result: ApiResult, action: str) -> str:
    """Turn a failed exchange into user-facing text.

    Prefers the server's ``message``/``error`` field; a JSON body without one
    falls back to the status text, and an unreadable or missing body to the
    status code and text.
    """
    if result.transport_failed:
        return f"Failed to {action} book: {result.error}"
    message = result.server_message()
    if message:
        return message
    if result.body_parsed:
        return f"Server error: {result.reason}"
    return f"Failed to {action} book. Server responded with: {result.status_code} {result.reason}"


class SyncController:
    """Turns user intents into REST calls and reconciles the responses.

    Every operation clears the status when it starts and works on local state
    only, so overlapping calls are safe; the store and status follow
    last-write-wins.
    """

    def __init__(
        self,
        api: BooksAPI,
        store: CollectionStore,
        session: EditSession,
        notifier: StatusNotifier,
        confirm: ConfirmCallback,
    ) -> None:
        self.api = api
        self.store = store
        self.session = session
        self.notifier = notifier
        self.confirm = confirm

    def edit(self, record: BookRecord) -> None:
        self.session.start_edit(record)

    def cancel(self) -> None:
        self.session.cancel()

    async def submit(self) -> bool:
        """Create or update the record held in the edit session."""
        self.notifier.clear()
        try:
            submission = self.session.build_submission()
        except DraftValidationError as e:
            logger.warning(f"Submission rejected: {e}")
            self.notifier.error(str(e))
            return False

        record = submission.record
        if submission.is_update:
            action, done = "update", "updated"
            result = await self.api.update_book(submission.target_isbn, record)
        else:
            action, done = "add", "added"
            result = await self.api.create_book(record)

        if not result.ok:
            message = describe_failure(result, action)
            logger.error(f"Failed to {action} book {record.isbn}: {message}")
            self.notifier.error(message)
            return False

        self.notifier.success(f'Book "{record.title}" {done} successfully!')
        self.session.start_create()
        await self.store.load()
        return True

    async def remove(self, isbn: str, title: str) -> bool:
        """Delete a record after the user confirms. A decline changes nothing."""
        if not self.confirm(f'Are you sure you want to delete "{title}" (ISBN: {isbn})?'):
            return False
        self.notifier.clear()

        result = await self.api.delete_book(isbn)
        if not result.ok:
            if result.status_code == 404 and not result.server_message():
                message = "Book not found on server."
            else:
                message = describe_failure(result, "delete")
            logger.error(f"Failed to delete book {isbn}: {message}")
            self.notifier.error(message)
            return False

        self.notifier.success(f'Book "{title}" deleted successfully!')
        if self.session.editing is not None and self.session.editing.isbn == isbn:
            self.session.start_create()
        await self.store.load()
        return True

    async def refresh(self) -> bool:
        self.notifier.clear()
        return await self.store.load()
