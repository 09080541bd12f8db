from enum import Enum
from typing import Dict, Optional
from pydantic import BaseModel, Field

from medrank.schemas.grand_test import ExamMode

DEFAULT_TOTAL_MARKS = 100

class FormStatus(str, Enum):
    CLOSED = "CLOSED"
    CREATE = "CREATE"
    EDIT = "EDIT"

class SubjectEntry(BaseModel):
    correct: int = Field(0, ge=0)
    wrong: int = Field(0, ge=0)
    unattempted: Optional[int] = Field(None, ge=0)
    obtained: float = Field(0, allow_inf_nan=False)
    total: float = Field(DEFAULT_TOTAL_MARKS, allow_inf_nan=False)

class SubjectEntryUpdate(BaseModel):
    correct: Optional[int] = Field(None, ge=0)
    wrong: Optional[int] = Field(None, ge=0)
    unattempted: Optional[int] = Field(None, ge=0)
    obtained: Optional[float] = Field(None, allow_inf_nan=False)
    total: Optional[float] = Field(None, allow_inf_nan=False)

class TestDraft(BaseModel):
    """Header fields and per-subject rows of the entry form."""

    __test__ = False

    name: str
    date: str
    mode: ExamMode = ExamMode.NEET_PG
    subjects: Dict[str, SubjectEntry] = Field(default_factory=dict)

class TestDraftUpdate(BaseModel):
    __test__ = False

    name: Optional[str] = None
    date: Optional[str] = None
    mode: Optional[ExamMode] = None
    subjects: Dict[str, SubjectEntry] = Field(default_factory=dict)

class FormOpenRequest(BaseModel):
    test_id: Optional[str] = None

class FormState(BaseModel):
    status: FormStatus
    test_id: Optional[str] = None
    draft: Optional[TestDraft] = None
