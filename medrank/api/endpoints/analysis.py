from fastapi import APIRouter, Depends

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.schemas.analysis import AnalysisOutcome, AnalysisStatus

router = APIRouter()

def _status(controller: DashboardController) -> AnalysisStatus:
    state = controller.state
    return AnalysisStatus(
        text=state.ai_analysis,
        is_analyzing=state.is_analyzing,
        pending_request_id=state.pending_request_id,
        test_count=len(state.tests),
    )

@router.get("/", response_model=AnalysisStatus)
async def read_analysis(controller: DashboardController = Depends(get_controller)) -> AnalysisStatus:
    return _status(controller)

@router.post("/", response_model=AnalysisOutcome)
async def request_analysis(controller: DashboardController = Depends(get_controller)) -> AnalysisOutcome:
    """
    Ask the AI coach about the latest test.

    Errors never fail the request: the returned **text** is then one of the
    fixed fallback messages. **applied** is false when a newer request or a
    tab change superseded this one.
    """
    return await controller.request_analysis()

@router.delete("/", response_model=AnalysisStatus)
async def cancel_analysis(controller: DashboardController = Depends(get_controller)) -> AnalysisStatus:
    controller.cancel_analysis()
    return _status(controller)
