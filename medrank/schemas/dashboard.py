from enum import Enum
from typing import List, Optional
from pydantic import BaseModel

from medrank.core.subjects import SubjectCategory
from medrank.schemas.grand_test import ExamMode

class Band(str, Enum):
    WEAK = "Weak"
    AVERAGE = "Average"
    STRONG = "Strong"

class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    FLAT = "flat"

class ActiveTab(str, Enum):
    DASHBOARD = "DASHBOARD"
    AI_INSIGHTS = "AI_INSIGHTS"

class TestColumn(BaseModel):
    __test__ = False

    id: str
    name: str
    date: str
    mode: ExamMode
    mode_label: str

class ScoreCell(BaseModel):
    test_id: str
    percentage: int
    band: Band
    color: str
    trend: Optional[Trend] = None
    diff_vs_average: float

class SubjectRow(BaseModel):
    subject_id: str
    name: str
    average: Optional[float] = None
    cells: List[ScoreCell]

class CategorySection(BaseModel):
    category: SubjectCategory
    label: str
    color: str
    # Mean subject percentage per test, aligned with Scoreboard.tests
    category_averages: List[float]
    rows: List[SubjectRow]

class LegendEntry(BaseModel):
    band: Band
    color: str
    range: str

class Scoreboard(BaseModel):
    category_filter: str
    mode_filter: Optional[ExamMode] = None
    tests: List[TestColumn]
    sections: List[CategorySection]
    legend: List[LegendEntry]
    empty: bool
    message: Optional[str] = None

class FilterUpdate(BaseModel):
    category: Optional[str] = None
    mode: Optional[ExamMode] = None
    clear_mode: bool = False

class TabUpdate(BaseModel):
    tab: ActiveTab
