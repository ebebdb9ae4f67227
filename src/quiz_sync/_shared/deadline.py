# Area: Shared
"""
quiz_sync._shared.deadline — Ledger call timeout enforcement
============================================================

Bounds every ledger request so a silent gateway can never leave an
operation pending forever. The tick loop keeps running either way; the
deadline only decides when the operation is reported as failed.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from ..errors import LedgerTimeoutError

T = TypeVar("T")


async def with_deadline(
    request: Awaitable[T],
    seconds: float,
    operation: str,
    session_id: Optional[str],
) -> T:
    """Await `request`, raising LedgerTimeoutError after `seconds`."""
    try:
        return await asyncio.wait_for(request, timeout=seconds)
    except asyncio.TimeoutError:
        raise LedgerTimeoutError(
            operation=operation,
            session_id=session_id,
            timeout_seconds=seconds,
        ) from None
