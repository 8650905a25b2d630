from __future__ import annotations

import hashlib
import hmac
import json
import logging
import os
import secrets
import sqlite3
import threading
from datetime import datetime, timezone
from typing import Any

from interview_coach.users.repository import UserExistsError

logger = logging.getLogger(__name__)

_PBKDF2_ITERATIONS = 240_000


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def hash_password(password: str, *, salt: str | None = None) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), _PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${_PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        _, iterations, salt, expected = stored.split("$", 3)
        digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), bytes.fromhex(salt), int(iterations))
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(digest.hex(), expected)


def _public_user(row: tuple[Any, ...], sessions: list[dict[str, Any]]) -> dict[str, Any]:
    return {
        "id": row[0],
        "name": row[1],
        "email": row[2],
        "joinDate": row[3],
        "sessions": sessions,
    }


class SqliteUserRepository:
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None
        self._lock = threading.Lock()

    def _connection(self) -> sqlite3.Connection:
        with self._lock:
            if self._conn is not None:
                return self._conn

            directory = os.path.dirname(self._db_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            conn = sqlite3.connect(
                self._db_path,
                check_same_thread=False,
                timeout=5,
                isolation_level=None,
            )
            conn.execute("PRAGMA journal_mode=WAL;")
            conn.execute("PRAGMA busy_timeout=5000;")
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE,
                    password_hash TEXT NOT NULL,
                    join_date TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS user_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL REFERENCES users (id),
                    payload_json TEXT NOT NULL,
                    created_at TEXT NOT NULL
                );
                """
            )
            conn.execute(
                """
                CREATE INDEX IF NOT EXISTS idx_user_sessions_user
                ON user_sessions (user_id, id);
                """
            )
            self._conn = conn
            return conn

    def init(self) -> None:
        self._connection()

    def create(self, *, name: str, email: str, password: str) -> dict[str, Any]:
        conn = self._connection()
        join_date = _utc_now()
        with self._lock:
            try:
                cur = conn.execute(
                    "INSERT INTO users (name, email, password_hash, join_date) VALUES (?, ?, ?, ?)",
                    (name, email, hash_password(password), join_date),
                )
            except sqlite3.IntegrityError as exc:
                raise UserExistsError("User already exists") from exc
            user_id = int(cur.lastrowid)
        logger.info(json.dumps({"event": "user_registered", "user_id": user_id}))
        return {"id": user_id, "name": name, "email": email, "joinDate": join_date, "sessions": []}

    def find_by_email(self, email: str) -> dict[str, Any] | None:
        conn = self._connection()
        with self._lock:
            row = conn.execute(
                "SELECT id, name, email, join_date, password_hash FROM users WHERE email = ?",
                (email,),
            ).fetchone()
        if not row:
            return None
        user = _public_user(row, self.list_sessions(int(row[0])))
        user["password_hash"] = row[4]
        return user

    def find_by_id(self, user_id: int) -> dict[str, Any] | None:
        conn = self._connection()
        with self._lock:
            row = conn.execute(
                "SELECT id, name, email, join_date FROM users WHERE id = ?",
                (user_id,),
            ).fetchone()
        if not row:
            return None
        return _public_user(row, self.list_sessions(int(row[0])))

    def append_session(self, user_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        conn = self._connection()
        created_at = _utc_now()
        clean = {key: value for key, value in payload.items() if key not in {"id", "date"}}
        with self._lock:
            cur = conn.execute(
                "INSERT INTO user_sessions (user_id, payload_json, created_at) VALUES (?, ?, ?)",
                (user_id, json.dumps(clean, ensure_ascii=False), created_at),
            )
            session_id = int(cur.lastrowid)
        return {"id": session_id, **clean, "date": created_at}

    def list_sessions(self, user_id: int) -> list[dict[str, Any]]:
        conn = self._connection()
        with self._lock:
            rows = conn.execute(
                "SELECT id, payload_json, created_at FROM user_sessions WHERE user_id = ? ORDER BY id",
                (user_id,),
            ).fetchall()
        sessions: list[dict[str, Any]] = []
        for session_id, payload_json, created_at in rows:
            payload = json.loads(payload_json) if payload_json else {}
            sessions.append({"id": session_id, **payload, "date": created_at})
        return sessions

    def clear(self) -> None:
        conn = self._connection()
        with self._lock:
            conn.execute("DELETE FROM user_sessions")
            conn.execute("DELETE FROM users")
