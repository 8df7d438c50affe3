from __future__ import annotations

from ..db import get_conn, transaction
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import memo_repo, user_repo
from .utils import blank, rows_to_dicts


def list_memos(user_id: int | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(memo_repo.list_for(conn, user_id))


def create_memo(user_id: int, title: str, content: str, category: str | None, log: LogContext) -> int:
    if blank(title) or blank(content):
        raise ValueError("title and content are required")
    with get_conn() as conn:
        if not user_repo.get(conn, user_id):
            raise NotFoundError("user not found")
        with transaction(conn):
            new_id = memo_repo.insert(conn, user_id, title, content, category)
    log.set_entity("MEMO", new_id)
    return new_id


def update_memo(memo_id: int, title: str, content: str, category: str | None, log: LogContext) -> None:
    if blank(title) or blank(content):
        raise ValueError("title and content are required")
    with get_conn() as conn:
        before = memo_repo.get(conn, memo_id)
        if not before:
            raise NotFoundError("memo not found")
        with transaction(conn):
            memo_repo.update(conn, memo_id, title, content, category)
    log.set_entity("MEMO", memo_id)
    log.set_before(dict(before))


def delete_memo(memo_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = memo_repo.get(conn, memo_id)
        if not before:
            raise NotFoundError("memo not found")
        with transaction(conn):
            memo_repo.delete(conn, memo_id)
    log.set_entity("MEMO", memo_id)
    log.set_before(dict(before))
