from typing import Any, List
from fastapi import APIRouter, Depends, HTTPException

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.core.exceptions import FormStateError, SubjectNotFoundError, TestNotFoundError
from medrank.schemas.common import APIResponse
from medrank.schemas.form import TestDraftUpdate
from medrank.schemas.grand_test import GrandTest

router = APIRouter()

@router.get("/", response_model=APIResponse[List[GrandTest]])
async def read_tests(controller: DashboardController = Depends(get_controller)) -> Any:
    """
    All stored tests, in the order they were added.
    """
    return APIResponse(data=list(controller.tests))

@router.post("/", response_model=APIResponse[GrandTest], status_code=201)
async def create_test(
    *,
    draft: TestDraftUpdate,
    controller: DashboardController = Depends(get_controller),
) -> Any:
    """
    Create a test in one step: opens the entry form, applies the draft and saves it.
    Subjects left out of the draft are saved with zero counts.
    """
    try:
        test = controller.create_test(draft)
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return APIResponse(data=test)

@router.get("/{test_id}", response_model=APIResponse[GrandTest])
async def read_test(
    *,
    test_id: str,
    controller: DashboardController = Depends(get_controller),
) -> Any:
    try:
        return APIResponse(data=controller.get_test(test_id))
    except TestNotFoundError:
        raise HTTPException(status_code=404, detail="Test not found")

@router.put("/{test_id}", response_model=APIResponse[GrandTest])
async def update_test(
    *,
    test_id: str,
    draft: TestDraftUpdate,
    controller: DashboardController = Depends(get_controller),
) -> Any:
    """
    Edit a test. The stored record is pre-loaded into the form (direct-entry
    records stay in direct-entry mode), the draft is applied on top and the
    whole record is replaced.
    """
    try:
        test = controller.edit_test(test_id, draft)
    except TestNotFoundError:
        raise HTTPException(status_code=404, detail="Test not found")
    except SubjectNotFoundError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except FormStateError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return APIResponse(data=test)

@router.delete("/{test_id}", response_model=APIResponse[bool])
async def delete_test(
    *,
    test_id: str,
    controller: DashboardController = Depends(get_controller),
) -> Any:
    try:
        controller.delete_test(test_id)
    except TestNotFoundError:
        raise HTTPException(status_code=404, detail="Test not found")
    return APIResponse(data=True)
