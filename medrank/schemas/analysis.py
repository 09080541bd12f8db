from typing import Optional
from pydantic import BaseModel

class AnalysisOutcome(BaseModel):
    request_id: str
    text: Optional[str] = None
    # False when the request was superseded or cancelled before it finished
    applied: bool

class AnalysisStatus(BaseModel):
    text: str
    is_analyzing: bool
    pending_request_id: Optional[str] = None
    test_count: int
