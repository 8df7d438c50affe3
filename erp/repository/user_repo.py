from __future__ import annotations

from sqlite3 import Connection
from typing import Iterable

_PUBLIC_COLS = "id, username, name, role, created_at"


def insert(conn: Connection, username: str, password_hash: str, name: str, role: str) -> int:
    cur = conn.execute(
        "INSERT INTO users(username, password, name, role) VALUES(?,?,?,?)",
        (username, password_hash, name, role),
    )
    return int(cur.lastrowid)


def get(conn: Connection, user_id: int):
    return conn.execute(f"SELECT {_PUBLIC_COLS} FROM users WHERE id=?", (user_id,)).fetchone()


def get_with_password(conn: Connection, username: str):
    return conn.execute(
        f"SELECT {_PUBLIC_COLS}, password FROM users WHERE username=?", (username,)
    ).fetchone()


def exists_username(conn: Connection, username: str) -> bool:
    return conn.execute("SELECT 1 FROM users WHERE username=?", (username,)).fetchone() is not None


def list_all(conn: Connection):
    return conn.execute(f"SELECT {_PUBLIC_COLS} FROM users ORDER BY created_at DESC, id DESC").fetchall()


def list_by_roles(conn: Connection, roles: Iterable[str]):
    roles = list(roles)
    placeholders = ",".join(["?"] * len(roles))
    return conn.execute(
        f"SELECT {_PUBLIC_COLS} FROM users WHERE role IN ({placeholders}) ORDER BY created_at DESC, id DESC",
        roles,
    ).fetchall()


def update(conn: Connection, user_id: int, username: str, name: str, role: str) -> int:
    cur = conn.execute(
        "UPDATE users SET username=?, name=?, role=? WHERE id=?",
        (username, name, role, user_id),
    )
    return cur.rowcount


def update_password(conn: Connection, user_id: int, password_hash: str) -> int:
    return conn.execute("UPDATE users SET password=? WHERE id=?", (password_hash, user_id)).rowcount


def update_role(conn: Connection, user_id: int, role: str) -> int:
    return conn.execute("UPDATE users SET role=? WHERE id=?", (role, user_id)).rowcount


def update_name(conn: Connection, user_id: int, name: str) -> int:
    return conn.execute("UPDATE users SET name=? WHERE id=?", (name, user_id)).rowcount


def delete(conn: Connection, user_id: int) -> int:
    return conn.execute("DELETE FROM users WHERE id=?", (user_id,)).rowcount
