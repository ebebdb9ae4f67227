# Area: Shared
"""
quiz_sync.errors — Custom exception classes
===========================================

Defines the exception hierarchy for ledger failures.
Each exception stores full context for structured logging.

None of these are fatal: every ledger operation catches them at its
boundary, logs them and degrades to a safe default.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json


class QuizSyncError(Exception):
    """Base exception for all quiz_sync package errors."""
    pass


class LedgerError(QuizSyncError):
    """Raised when a ledger read or write does not succeed."""

    error_type = "LEDGER_ERROR"

    def __init__(
        self,
        operation: str,
        session_id: Optional[str],
        message: str,
        request_payload: Optional[Dict[str, Any]] = None,
    ):
        self.operation = operation
        self.session_id = session_id
        self.request_payload = request_payload or {}
        super().__init__(f"Ledger {operation} failed: {message}")

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            operation=self.operation,
            session_id=self.session_id,
            detail=str(self),
            request_payload=self.request_payload,
            validation_errors=None,
        )


class NetworkError(LedgerError):
    """The ledger could not be reached or answered with a server error."""

    error_type = "NETWORK_ERROR"


class LedgerTimeoutError(NetworkError):
    """Raised when a ledger call exceeds its deadline."""

    error_type = "LEDGER_TIMEOUT"

    def __init__(
        self,
        operation: str,
        session_id: Optional[str],
        timeout_seconds: float,
        request_payload: Optional[Dict[str, Any]] = None,
    ):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            operation,
            session_id,
            f"no response after {timeout_seconds} seconds",
            request_payload,
        )


class NotFoundError(LedgerError):
    """The requested session or score entry does not exist."""

    error_type = "NOT_FOUND"


class MalformedDataError(LedgerError):
    """Raised when a ledger object is missing fields or has the wrong shape."""

    error_type = "MALFORMED_DATA"

    def __init__(
        self,
        operation: str,
        session_id: Optional[str],
        validation_errors: List[str],
        raw_payload: Any = None,
    ):
        self.validation_errors = validation_errors
        self.raw_payload = raw_payload
        super().__init__(
            operation,
            session_id,
            f"unexpected data shape: {validation_errors}",
        )

    def format_error_log(self) -> str:
        return _format_error_block(
            error_type=self.error_type,
            operation=self.operation,
            session_id=self.session_id,
            detail=str(self),
            request_payload={"raw_payload": repr(self.raw_payload)},
            validation_errors=self.validation_errors,
        )


class LedgerRejectedError(LedgerError):
    """The ledger refused a write (duplicate score, non-host finalize, ...)."""

    error_type = "LEDGER_REJECTED"


def _format_error_block(
    error_type: str,
    operation: str,
    session_id: Optional[str],
    detail: str,
    request_payload: Dict[str, Any],
    validation_errors: Optional[List[str]],
) -> str:
    """Format a structured error block for the log file."""
    from datetime import datetime, timezone

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"

    lines = [
        "",
        "=" * 64,
        " LEDGER ERROR — OPERATION SKIPPED",
        "=" * 64,
        f" Timestamp:    {timestamp}",
        f" Error Type:   {error_type}",
        f" Operation:    {operation}",
        f" Session:      {session_id or '-'}",
        f" Detail:       {detail}",
    ]

    if request_payload:
        lines.append("")
        lines.append(" ── REQUEST PAYLOAD " + "─" * 44)
        lines.append(_indent_json(request_payload))

    if validation_errors:
        lines.append("")
        lines.append(" ── VALIDATION ERRORS " + "─" * 42)
        for error in validation_errors:
            lines.append(f" • {error}")

    lines.append("")
    lines.append("=" * 64)
    lines.append("")

    return "\n".join(lines)


def _indent_json(data: Dict[str, Any], indent: int = 2) -> str:
    """Format JSON with indentation for error logs."""
    try:
        formatted = json.dumps(data, indent=indent, default=str)
        return "\n".join(" " + line for line in formatted.split("\n"))
    except (TypeError, ValueError):
        return f" {repr(data)}"
