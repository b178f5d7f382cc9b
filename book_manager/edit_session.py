from dataclasses import dataclass
from typing import List, Optional

from book_manager.book import BookRecord
from book_manager.status import StatusNotifier

FIELD_LABELS = {"isbn": "ISBN", "title": "Title", "author": "Author"}


class DraftValidationError(ValueError):
    """Raised when the form draft cannot be submitted."""

    def __init__(self, message: str, fields: Optional[List[str]] = None, key_changed: bool = False):
        super().__init__(message)
        self.fields = fields or []
        self.key_changed = key_changed


@dataclass(frozen=True)
class Submission:
    """Snapshot of a validated draft.

    ``target_isbn`` is None for a new record, otherwise the stored ISBN of the
    record being updated.
    """
    record: BookRecord
    target_isbn: Optional[str] = None

    @property
    def is_update(self) -> bool:
        return self.target_isbn is not None


class EditSession:
    """The single form draft, either a blank new record or an edit of an existing one."""

    def __init__(self, notifier: Optional[StatusNotifier] = None) -> None:
        self.notifier = notifier
        self.editing: Optional[BookRecord] = None
        self.isbn = ""
        self.title = ""
        self.author = ""

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    @property
    def form_title(self) -> str:
        return "Edit Book" if self.is_editing else "Add New Book"

    @property
    def submit_label(self) -> str:
        return "Update Book" if self.is_editing else "Add Book"

    def start_create(self) -> None:
        self.editing = None
        self.isbn = ""
        self.title = ""
        self.author = ""

    def start_edit(self, record: BookRecord) -> None:
        self.editing = record
        self.isbn = record.isbn
        self.title = record.title
        self.author = record.author
        if self.notifier is not None:
            self.notifier.info(f"Editing book: {record.title}")

    def cancel(self) -> None:
        self.start_create()

    # Setters accept anything; constraints are checked at submit time.
    def set_isbn(self, value: str) -> None:
        self.isbn = value

    def set_title(self, value: str) -> None:
        self.title = value

    def set_author(self, value: str) -> None:
        self.author = value

    def build_submission(self) -> Submission:
        """Validate the draft and snapshot it for sending.

        Raises:
            DraftValidationError: a field is blank, or the ISBN of the record
                being edited was changed.
        """
        blank = [name for name in ("isbn", "title", "author") if not getattr(self, name).strip()]
        if blank:
            labels = ", ".join(FIELD_LABELS[name] for name in blank)
            raise DraftValidationError(f"Required field(s) missing: {labels}", fields=blank)

        if self.editing is not None and self.isbn != self.editing.isbn:
            raise DraftValidationError(
                "Error: ISBN cannot be changed during an update.",
                fields=["isbn"],
                key_changed=True,
            )

        record = BookRecord(isbn=self.isbn, title=self.title, author=self.author)
        target = self.editing.isbn if self.editing is not None else None
        return Submission(record=record, target_isbn=target)
