# Area: Shared
"""
quiz_sync.demo_scores — Deterministic placeholder scores
========================================================

The offline demo has no real opponents, so simulated peers submit a
placeholder score. The value is drawn from a PRNG seeded with
SHA-256(session_id ":" lower(player_id)), so every client, every run,
sees the same number for the same peer in the same session.
"""

import hashlib
import random

PLACEHOLDER_MIN = 1000
PLACEHOLDER_SPAN = 3000


def placeholder_seed(session_id: str, player_id: str) -> int:
    digest = hashlib.sha256(f"{session_id}:{player_id.lower()}".encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big")


def placeholder_score(session_id: str, player_id: str) -> int:
    """Score in [PLACEHOLDER_MIN, PLACEHOLDER_MIN + PLACEHOLDER_SPAN)."""
    rng = random.Random(placeholder_seed(session_id, player_id))
    return PLACEHOLDER_MIN + rng.randrange(PLACEHOLDER_SPAN)
