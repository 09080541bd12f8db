import logging
from typing import Any, Optional
from fastapi import APIRouter, Body, Depends, HTTPException

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.core.exceptions import FormStateError, SubjectNotFoundError, TestNotFoundError
from medrank.schemas.common import APIResponse
from medrank.schemas.form import FormOpenRequest, FormState, SubjectEntryUpdate, TestDraftUpdate
from medrank.schemas.grand_test import GrandTest

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_model=FormState)
async def read_form(controller: DashboardController = Depends(get_controller)) -> FormState:
    return controller.form.state()

@router.post("/", response_model=FormState)
async def open_form(
    request: Optional[FormOpenRequest] = Body(None),
    controller: DashboardController = Depends(get_controller),
) -> FormState:
    """
    Open the entry form.

    - Without **test_id**: a new test named GT{n+1}, NEET PG mode, today's date.
    - With **test_id**: edit mode, pre-populated from the stored record.
    """
    test_id = request.test_id if request else None
    try:
        return controller.open_form(test_id)
    except TestNotFoundError:
        raise HTTPException(status_code=404, detail="Test not found")

@router.patch("/subjects/{subject_id}", response_model=FormState)
async def update_subject_row(
    subject_id: str,
    update: SubjectEntryUpdate,
    controller: DashboardController = Depends(get_controller),
) -> FormState:
    try:
        return controller.update_form_subject(subject_id, update)
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.put("/", response_model=FormState)
async def apply_draft(
    update: TestDraftUpdate,
    controller: DashboardController = Depends(get_controller),
) -> FormState:
    try:
        return controller.apply_form(update)
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))

@router.post("/save", response_model=APIResponse[GrandTest])
async def save_form(controller: DashboardController = Depends(get_controller)) -> Any:
    """
    Recompute every subject score and store the complete record.
    """
    try:
        test = controller.save_form()
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except TestNotFoundError:
        logger.warning("Edited test disappeared before the form was saved.")
        raise HTTPException(status_code=404, detail="Test not found")
    return APIResponse(data=test)

@router.delete("/", response_model=FormState)
async def close_form(controller: DashboardController = Depends(get_controller)) -> FormState:
    controller.close_form()
    return controller.form.state()
