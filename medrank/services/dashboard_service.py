from typing import Dict, List, Optional, Sequence

from medrank.core.subjects import ALL_CATEGORIES, CATEGORIES, SubjectCategory, categories_for, subjects_in
from medrank.schemas.dashboard import (
    Band,
    CategorySection,
    LegendEntry,
    ScoreCell,
    Scoreboard,
    SubjectRow,
    TestColumn,
)
from medrank.schemas.grand_test import ExamMode, GrandTest
from medrank.services.score_service import BAND_RANGES, score_service

EMPTY_MESSAGE = "No test data available. Add your first GT to see the scoreboard."

CATEGORY_COLORS: Dict[SubjectCategory, str] = {
    SubjectCategory.RANK_BUILDING: "DBEAFE",
    SubjectCategory.RANK_MAINTAINING: "F3E8FF",
    SubjectCategory.RANK_DECIDING: "FFEDD5",
}

def filter_by_mode(tests: Sequence[GrandTest], mode: Optional[ExamMode]) -> List[GrandTest]:
    if mode is None:
        return list(tests)
    return [test for test in tests if test.mode == mode]

class DashboardService:
    def legend(self) -> List[LegendEntry]:
        return [
            LegendEntry(band=band, color=score_service.band_color(band), range=BAND_RANGES[band])
            for band in Band
        ]

    def _row(self, tests: Sequence[GrandTest], subject_id: str, name: str) -> SubjectRow:
        average = score_service.subject_average(tests, subject_id)
        cells = []
        for test in tests:
            percentage = test.percentage_for(subject_id)
            band = score_service.classify_band(percentage)
            cells.append(ScoreCell(
                test_id=test.id,
                percentage=percentage,
                band=band,
                color=score_service.band_color(band),
                trend=score_service.compute_trend(percentage, average, len(tests)),
                diff_vs_average=round(percentage - average, 1),
            ))
        return SubjectRow(
            subject_id=subject_id,
            name=name,
            # only meaningful once there is something to compare against
            average=round(average, 1) if len(tests) > 1 else None,
            cells=cells,
        )

    def render(
        self,
        tests: Sequence[GrandTest],
        category_filter: str = ALL_CATEGORIES,
        mode_filter: Optional[ExamMode] = None,
    ) -> Scoreboard:
        """
        Build the subject x test scoreboard for the visible tests.

        Rows are grouped by category in catalog order. Each cell carries its
        band color and, with two or more tests, a trend against the subject's
        mean across the visible tests.
        """
        visible = filter_by_mode(tests, mode_filter)

        sections = []
        for category in categories_for(category_filter):
            subjects = subjects_in(category)
            rows = [self._row(visible, subject.id, subject.name) for subject in subjects]
            category_averages = [
                round(sum(test.percentage_for(subject.id) for subject in subjects) / len(subjects), 1)
                for test in visible
            ]
            sections.append(CategorySection(
                category=category,
                label=CATEGORIES[category],
                color=CATEGORY_COLORS[category],
                category_averages=category_averages,
                rows=rows,
            ))

        return Scoreboard(
            category_filter=category_filter,
            mode_filter=mode_filter,
            tests=[
                TestColumn(id=test.id, name=test.name, date=test.date, mode=test.mode, mode_label=test.mode.label)
                for test in visible
            ],
            sections=sections,
            legend=self.legend(),
            empty=not visible,
            message=EMPTY_MESSAGE if not visible else None,
        )

dashboard_service = DashboardService()
