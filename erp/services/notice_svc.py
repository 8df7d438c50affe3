from __future__ import annotations

from ..db import get_conn, transaction
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import notice_repo
from .utils import blank, rows_to_dicts


def _require_text(title: str, content: str) -> None:
    if blank(title) or blank(content):
        raise ValueError("title and content are required")


def list_notices(search: str | None = None) -> list[dict]:
    with get_conn() as conn:
        return rows_to_dicts(notice_repo.list_filtered(conn, search))


def create_notice(data: dict, log: LogContext) -> int:
    _require_text(data.get("title"), data.get("content"))
    with get_conn() as conn:
        with transaction(conn):
            new_id = notice_repo.insert(conn, data["title"], data["content"], data.get("author_id"),
                                        bool(data.get("is_important")), bool(data.get("is_pinned")))
    log.set_entity("NOTICE", new_id)
    log.set_after(data)
    return new_id


def update_notice(notice_id: int, data: dict, log: LogContext) -> None:
    _require_text(data.get("title"), data.get("content"))
    with get_conn() as conn:
        before = notice_repo.get(conn, notice_id)
        if not before:
            raise NotFoundError("notice not found")
        with transaction(conn):
            notice_repo.update(conn, notice_id, data["title"], data["content"],
                               bool(data.get("is_important")), bool(data.get("is_pinned")))
    log.set_entity("NOTICE", notice_id)
    log.set_before(dict(before)); log.set_after(data)


def view_notice(notice_id: int) -> int:
    with get_conn() as conn:
        if not notice_repo.increment_view(conn, notice_id):
            raise NotFoundError("notice not found")
        return int(notice_repo.get(conn, notice_id)["view_count"])


def delete_notice(notice_id: int, log: LogContext) -> None:
    with get_conn() as conn:
        before = notice_repo.get(conn, notice_id)
        if not before:
            raise NotFoundError("notice not found")
        with transaction(conn):
            notice_repo.delete(conn, notice_id)
    log.set_entity("NOTICE", notice_id)
    log.set_before(dict(before))
