from __future__ import annotations

from sqlite3 import Connection


def get_by_email(conn: Connection, email: str):
    return conn.execute("SELECT * FROM users WHERE email = ?", (email,)).fetchone()


def get_by_id(conn: Connection, user_id: int):
    return conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()


def insert_user(conn: Connection, name: str, email: str, password: str) -> int:
    cur = conn.execute(
        "INSERT INTO users(name, email, password) VALUES(?,?,?)",
        (name, email, password),
    )
    return int(cur.lastrowid)
