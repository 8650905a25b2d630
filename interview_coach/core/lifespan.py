from contextlib import asynccontextmanager
import json
import logging

from interview_coach.core.catalog import get_catalog
from interview_coach.services.interview_llm import llm_enabled
from interview_coach.users import get_user_repository

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app):
    catalog = get_catalog()
    repo = get_user_repository()
    init = getattr(repo, "init", None)
    if callable(init):
        init()

    logger.info(
        json.dumps(
            {
                "event": "startup",
                "categories": list(catalog["categories"].keys()),
                "ai_enabled": llm_enabled(),
            }
        )
    )
    yield
    logger.info(json.dumps({"event": "shutdown"}))
