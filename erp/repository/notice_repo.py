from __future__ import annotations

from sqlite3 import Connection

from . import like


def insert(conn: Connection, title: str, content: str, author_id: int | None, is_important: bool, is_pinned: bool) -> int:
    cur = conn.execute(
        "INSERT INTO notices(title, content, author_id, is_important, is_pinned) VALUES(?,?,?,?,?)",
        (title, content, author_id, 1 if is_important else 0, 1 if is_pinned else 0),
    )
    return int(cur.lastrowid)


def get(conn: Connection, notice_id: int):
    return conn.execute(
        "SELECT n.*, u.name AS author_name FROM notices n LEFT JOIN users u ON n.author_id = u.id WHERE n.id=?",
        (notice_id,),
    ).fetchone()


def list_filtered(conn: Connection, search: str | None = None):
    sql = "SELECT n.*, u.name AS author_name FROM notices n LEFT JOIN users u ON n.author_id = u.id WHERE 1=1"
    params: list[object] = []
    if search:
        sql += " AND (n.title LIKE ? OR n.content LIKE ?)"
        params += [like(search)] * 2
    sql += " ORDER BY n.is_pinned DESC, n.created_at DESC, n.id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, notice_id: int, title: str, content: str, is_important: bool, is_pinned: bool) -> int:
    cur = conn.execute(
        "UPDATE notices SET title=?, content=?, is_important=?, is_pinned=?, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (title, content, 1 if is_important else 0, 1 if is_pinned else 0, notice_id),
    )
    return cur.rowcount


def increment_view(conn: Connection, notice_id: int) -> int:
    return conn.execute("UPDATE notices SET view_count = view_count + 1 WHERE id=?", (notice_id,)).rowcount


def delete(conn: Connection, notice_id: int) -> int:
    return conn.execute("DELETE FROM notices WHERE id=?", (notice_id,)).rowcount
