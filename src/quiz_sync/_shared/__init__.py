# Area: Shared
"""
Shared utilities used by the core components and the runner.

This package contains:
- Logging configuration
- Ledger payload schemas and call deadlines
- The notice board for non-fatal failures
"""

from .logging_config import setup_logging
from .deadline import with_deadline
from .notices import NoticeBoard, NoticeHandler
from .schemas import SessionRecord, parse_score_entry, parse_session_record

__all__ = [
    "setup_logging",
    "with_deadline",
    "NoticeBoard",
    "NoticeHandler",
    "SessionRecord",
    "parse_score_entry",
    "parse_session_record",
]
