from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile, status

from interview_coach.core.config import settings
from interview_coach.core.rate_limit import rate_limit
from interview_coach.schemas.interview import AnalyzeRequest, AnalyzeResponse
from interview_coach.services.analysis_service import analyze_request, analyze_upload

router = APIRouter()

ALLOWED_VIDEO_EXTENSIONS = {"mp4", "webm", "mov", "m4v", "mkv", "avi", "mp3", "wav", "m4a"}


async def _read_limited(file: UploadFile) -> bytes:
    max_bytes = settings.max_upload_mb * 1024 * 1024
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = await file.read(1024 * 64)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File too large. Maximum allowed size is {settings.max_upload_mb} MB.",
            )
        chunks.append(chunk)
    return b"".join(chunks)


@router.post("/analyze", response_model=AnalyzeResponse)
@rate_limit("analysis")
async def analyze(request: Request, payload: AnalyzeRequest):
    _ = request
    return await analyze_request(payload)


@router.post("/analyze/video", response_model=AnalyzeResponse)
@rate_limit("analysis")
async def analyze_video(
    request: Request,
    video: UploadFile | None = File(default=None),
    field: str = Form(default="", max_length=200),
):
    _ = request
    if video is None or not video.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="video file is required")

    filename = video.filename
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in ALLOWED_VIDEO_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: {', '.join(sorted(ALLOWED_VIDEO_EXTENSIONS))}.",
        )

    content = await _read_limited(video)
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="video file is empty")
    return await analyze_upload(field, filename=filename, content=content)
