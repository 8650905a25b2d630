from fastapi import APIRouter

from interview_coach.services.interview_llm import llm_enabled

router = APIRouter()

@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "ai": llm_enabled()}
