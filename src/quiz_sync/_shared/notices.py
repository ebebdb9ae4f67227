# Area: Shared
"""
quiz_sync._shared.notices — Non-fatal notices for the UI layer
==============================================================

Failed ledger operations never stop the round. They are logged and
posted here so whatever renders the game can show them (a toast in a
browser client, a line in the terminal demo).
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from ..errors import LedgerError
from ..types import Notice

logger = logging.getLogger("quiz_sync.notices")

NoticeHandler = Callable[[Notice], None]


class NoticeBoard:
    """Keeps the most recent notices and forwards each to a handler."""

    def __init__(self, handler: Optional[NoticeHandler] = None, capacity: int = 50) -> None:
        self._handler = handler
        self._recent: Deque[Notice] = deque(maxlen=capacity)

    @property
    def recent(self) -> List[Notice]:
        return list(self._recent)

    def post(self, notice: Notice) -> None:
        self._recent.append(notice)
        if self._handler is not None:
            try:
                self._handler(notice)
            except Exception:
                logger.exception("Notice handler failed for %r", notice.message)

    def info(self, message: str, operation: Optional[str] = None) -> None:
        self.post(Notice("info", message, operation))

    def success(self, message: str, operation: Optional[str] = None) -> None:
        self.post(Notice("success", message, operation))

    def failure(self, message: str, error: LedgerError) -> None:
        """Log a ledger failure with its structured block and post it."""
        logger.warning("%s: %s", message, error)
        logger.debug(error.format_error_log())
        self.post(Notice(
            "error",
            message,
            error.operation,
            details={"error_type": error.error_type, "session_id": error.session_id},
        ))
