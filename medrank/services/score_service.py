import math
from typing import Dict, Optional, Sequence, Tuple

from medrank.schemas.dashboard import Band, Trend
from medrank.schemas.grand_test import ExamMode, GrandTest, SubjectScore

# (marks per correct answer, marks deducted per wrong answer, max marks per question)
MARKING_SCHEMES: Dict[ExamMode, Tuple[float, float, float]] = {
    ExamMode.NEET_PG: (4, 1, 4),
    ExamMode.INI_CET: (1, 0.33, 1),
}

WEAK_UPPER_BOUND = 50
STRONG_LOWER_BOUND = 80
TREND_DEAD_ZONE = 0.5

BAND_COLORS: Dict[Band, str] = {
    Band.WEAK: "FECACA",
    Band.AVERAGE: "FEF9C3",
    Band.STRONG: "BBF7D0",
}

BAND_RANGES: Dict[Band, str] = {
    Band.WEAK: "0-50%",
    Band.AVERAGE: "51-79%",
    Band.STRONG: "80-100%",
}

def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))

class ScoreService:
    def calculate_marks(self, correct: int, wrong: int, mode: ExamMode) -> Tuple[float, float]:
        """
        Convert raw attempt counts into (obtained, total) marks.

        NEET PG awards +4 / -1, INI CET awards +1 / -0.33. Both values are
        rounded to 2 decimals. Direct entry (CUSTOM) has no formula.
        """
        if correct < 0 or wrong < 0:
            raise ValueError("Correct and wrong counts must be non-negative")

        scheme = MARKING_SCHEMES.get(mode)
        if scheme is None:
            raise ValueError(f"No marking scheme for mode {mode.value}; marks are entered directly")

        positive, negative, per_question = scheme
        obtained = correct * positive - wrong * negative
        total = (correct + wrong) * per_question
        return round(obtained, 2), round(total, 2)

    def calculate_percentage(self, obtained: float, total: float) -> int:
        # Not clamped: all-wrong answers under negative marking give a negative percentage
        if total > 0:
            return round_half_up(obtained / total * 100)
        return 0

    def build_subject_score(
        self,
        subject_id: str,
        mode: ExamMode,
        correct: int = 0,
        wrong: int = 0,
        obtained: Optional[float] = None,
        total: Optional[float] = None,
        unattempted: Optional[int] = None,
    ) -> SubjectScore:
        if mode == ExamMode.CUSTOM:
            obtained_marks = round(obtained or 0, 2)
            total_marks = round(total or 0, 2)
        else:
            obtained_marks, total_marks = self.calculate_marks(correct, wrong, mode)

        return SubjectScore(
            subject_id=subject_id,
            correct=correct,
            wrong=wrong,
            unattempted=unattempted,
            obtained_marks=obtained_marks,
            total_marks=total_marks,
            percentage=self.calculate_percentage(obtained_marks, total_marks),
        )

    def classify_band(self, percentage: float) -> Band:
        # 50 is still Weak, 80 is already Strong
        if percentage <= WEAK_UPPER_BOUND:
            return Band.WEAK
        if percentage < STRONG_LOWER_BOUND:
            return Band.AVERAGE
        return Band.STRONG

    def band_color(self, band: Band) -> str:
        return BAND_COLORS[band]

    def subject_average(self, tests: Sequence[GrandTest], subject_id: str) -> float:
        if not tests:
            return 0.0
        total = sum(test.percentage_for(subject_id) for test in tests)
        return total / len(tests)

    def compute_trend(self, percentage: float, average: float, test_count: int) -> Optional[Trend]:
        """Trend of one score against the subject's cross-test mean; None with fewer than two tests."""
        if test_count <= 1:
            return None
        diff = percentage - average
        if diff > TREND_DEAD_ZONE:
            return Trend.UP
        if diff < -TREND_DEAD_ZONE:
            return Trend.DOWN
        return Trend.FLAT

score_service = ScoreService()
