import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class StatusKind(str, Enum):
    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class StatusMessage:
    text: str
    kind: StatusKind


StatusListener = Callable[[Optional[StatusMessage]], None]


class StatusNotifier:
    """Holds the single transient status message. New messages overwrite, never queue."""

    def __init__(self) -> None:
        self.message: Optional[StatusMessage] = None
        self._listeners: List[StatusListener] = []

    def subscribe(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def info(self, text: str) -> None:
        self._set(StatusMessage(text, StatusKind.INFO))

    def success(self, text: str) -> None:
        self._set(StatusMessage(text, StatusKind.SUCCESS))

    def error(self, text: str) -> None:
        self._set(StatusMessage(text, StatusKind.ERROR))

    def clear(self) -> None:
        self._set(None)

    def _set(self, message: Optional[StatusMessage]) -> None:
        self.message = message
        if message is not None:
            logger.debug(f"Status [{message.kind.value}]: {message.text}")
        for listener in self._listeners:
            listener(message)
