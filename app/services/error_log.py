"""In-process error log.

A fixed-size circular buffer of recent errors, built once by the server and
handed to whoever needs it. When full, the oldest entry is dropped.
"""

import logging
import traceback
from collections import deque
from datetime import datetime, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50


class ErrorLog:
    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._entries: deque[dict] = deque(maxlen=capacity)

    def log(
        self,
        error: BaseException | str,
        context: Optional[Any] = None,
        source: str = "server",
        stack: Optional[str] = None,
    ) -> dict:
        """Record an exception or message and return the stored entry."""
        if isinstance(error, BaseException):
            message = str(error) or type(error).__name__
            if stack is None and error.__traceback__ is not None:
                stack = "".join(traceback.format_exception(type(error), error, error.__traceback__))
        else:
            message = error

        entry = {
            "message": message,
            "stack": stack,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "context": context,
            "source": source,
        }
        self._entries.append(entry)
        logger.debug("Error logged [%s]: %s", source, message)
        return entry

    def get_errors(self) -> list[dict]:
        """Oldest first. The list is a copy; mutating it doesn't touch the log."""
        return [dict(e) for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
