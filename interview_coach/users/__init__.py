from functools import lru_cache

from interview_coach.core.config import settings

from .repository import UserExistsError, UserRepository
from .sqlite_store import SqliteUserRepository, verify_password


@lru_cache(maxsize=1)
def get_user_repository() -> UserRepository:
    return SqliteUserRepository(settings.users_db_path)


__all__ = [
    "SqliteUserRepository",
    "UserExistsError",
    "UserRepository",
    "get_user_repository",
    "verify_password",
]
