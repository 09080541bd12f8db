from typing import Any, Dict, List
from fastapi import APIRouter

from medrank.core.subjects import CATEGORIES, subjects_in
from medrank.schemas.common import APIResponse

router = APIRouter()

@router.get("/", response_model=APIResponse[List[Dict[str, Any]]])
async def read_subjects() -> Any:
    """
    Subject catalog grouped by category, in display order.
    """
    groups = [
        {
            "category": category.value,
            "label": label,
            "subjects": [subject.model_dump() for subject in subjects_in(category)],
        }
        for category, label in CATEGORIES.items()
    ]
    return APIResponse(data=groups)
