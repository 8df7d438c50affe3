"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused, so services avoid SQL strings.
Every function takes an open Connection; callers own commit/rollback.
"""
from __future__ import annotations


def like(term: str) -> str:
    return f"%{term}%"
