from __future__ import annotations

from typing import Literal

from slowapi import Limiter
from slowapi.util import get_remote_address

from interview_coach.core.config import settings

limiter = Limiter(key_func=get_remote_address)

LimitScope = Literal["default", "analysis"]


def _limit_for(scope: LimitScope) -> str:
    if scope == "analysis":
        return settings.analysis_rate_limit
    return settings.rate_limit


def rate_limit(scope: LimitScope = "default"):
    """Route decorator; a no-op when RATE_LIMIT_ENABLED is off."""
    if settings.rate_limit_enabled:
        return limiter.limit(_limit_for(scope))

    def passthrough(func):
        return func

    return passthrough
