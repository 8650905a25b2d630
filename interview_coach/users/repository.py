from __future__ import annotations

from typing import Any, Protocol


class UserExistsError(ValueError):
    pass


class UserRepository(Protocol):
    def create(self, *, name: str, email: str, password: str) -> dict[str, Any]:
        """Persist a new account and return it without credentials."""

    def find_by_email(self, email: str) -> dict[str, Any] | None:
        """Return the stored account including ``password_hash``, or None."""

    def find_by_id(self, user_id: int) -> dict[str, Any] | None:
        ...

    def append_session(self, user_id: int, payload: dict[str, Any]) -> dict[str, Any]:
        ...

    def list_sessions(self, user_id: int) -> list[dict[str, Any]]:
        ...
