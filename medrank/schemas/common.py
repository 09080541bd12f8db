from typing import Generic, TypeVar, Optional
from pydantic import BaseModel

T = TypeVar("T")

class APIResponse(BaseModel, Generic[T]):
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True

class UIState(BaseModel):
    active_tab: str
    category_filter: str
    mode_filter: Optional[str] = None
    is_analyzing: bool
    test_count: int
