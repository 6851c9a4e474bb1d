"""
Dashboard Routes

GET /dashboard/stats - Headline employee counts
POST /dashboard/ask - Ask the AI assistant about the workforce
"""

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool

from talentos.api.deps import get_dashboard_service
from talentos.core.auth import get_current_employee
from talentos.schemas.schemas import AiAnswer, AiQuestion, DashboardStats
from talentos.services.dashboard_service import DashboardService

router = APIRouter(prefix="/dashboard", tags=["Dashboard"], dependencies=[Depends(get_current_employee)])


@router.get("/stats", response_model=DashboardStats)
def get_stats(service: DashboardService = Depends(get_dashboard_service)):
    return service.get_stats()


@router.post("/ask", response_model=AiAnswer)
async def ask(request: AiQuestion, service: DashboardService = Depends(get_dashboard_service)):
    """
    Answer a free-text question from current employee data.

    AI failures come back as a readable answer, never as an error status.
    """
    answer = await run_in_threadpool(service.ask_ai, request.question)
    return AiAnswer(answer=answer)
