from __future__ import annotations

from sqlite3 import Connection


def insert(conn: Connection, user_id: int, title: str, content: str, category: str | None) -> int:
    cur = conn.execute(
        "INSERT INTO memos(user_id, title, content, category) VALUES(?,?,?,?)",
        (user_id, title, content, category),
    )
    return int(cur.lastrowid)


def get(conn: Connection, memo_id: int):
    return conn.execute("SELECT * FROM memos WHERE id=?", (memo_id,)).fetchone()


def list_for(conn: Connection, user_id: int | None = None):
    sql = "SELECT m.*, u.name AS user_name FROM memos m LEFT JOIN users u ON m.user_id = u.id"
    params: list[object] = []
    if user_id is not None:
        sql += " WHERE m.user_id = ?"
        params.append(user_id)
    sql += " ORDER BY m.created_at DESC, m.id DESC"
    return conn.execute(sql, params).fetchall()


def update(conn: Connection, memo_id: int, title: str, content: str, category: str | None) -> int:
    cur = conn.execute(
        "UPDATE memos SET title=?, content=?, category=?, updated_at=CURRENT_TIMESTAMP WHERE id=?",
        (title, content, category, memo_id),
    )
    return cur.rowcount


def delete(conn: Connection, memo_id: int) -> int:
    return conn.execute("DELETE FROM memos WHERE id=?", (memo_id,)).rowcount
