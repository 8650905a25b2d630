import json
import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi import _rate_limit_exceeded_handler
import sentry_sdk

from interview_coach.api.v1.health import router as health_router
from interview_coach.api.v1.questions import router as questions_router
from interview_coach.api.v1.analyze import router as analyze_router
from interview_coach.api.v1.users import router as users_router
from interview_coach.core.cors import cors_allow_credentials, cors_allowed_origins
from interview_coach.core.rate_limit import limiter
from interview_coach.core.config import settings
from interview_coach.core.lifespan import lifespan
from interview_coach.features.field_classifier import InvalidInputError

logging.basicConfig(level=settings.log_level, format="%(message)s")
if settings.sentry_dsn:
    sentry_sdk.init(dsn=settings.sentry_dsn)

logger = logging.getLogger("interview_coach")

app = FastAPI(title="Interview Coach API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_allowed_origins(),
    allow_credentials=cors_allow_credentials(),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    logger.info(json.dumps({"event": "invalid_input", "path": request.url.path, "error": str(exc)}))
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": str(exc)})


app.include_router(health_router, prefix="/api", tags=["Health"])
app.include_router(questions_router, prefix="/api", tags=["Questions"])
app.include_router(analyze_router, prefix="/api", tags=["Analysis"])
app.include_router(users_router, prefix="/api", tags=["Users"])
