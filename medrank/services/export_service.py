import logging
from datetime import date
from io import BytesIO
from typing import Optional, Sequence, Tuple

from medrank.core.exceptions import ExportError, ExportUnavailableError
from medrank.core.subjects import ALL_CATEGORIES, CATEGORIES, categories_for, subjects_in
from medrank.schemas.grand_test import ExamMode, GrandTest
from medrank.services.dashboard_service import CATEGORY_COLORS, filter_by_mode
from medrank.services.score_service import score_service

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
SHEET_TITLE = "Scores"
HEADER_FILL = "4F46E5"

def _load_openpyxl():
    try:
        import openpyxl
        from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
        from openpyxl.utils import get_column_letter
    except ImportError as e:
        raise ExportUnavailableError(
            "Spreadsheet export is not available. pip install openpyxl"
        ) from e
    return openpyxl, Alignment, Border, Font, PatternFill, Side, get_column_letter

def export_filename(mode_filter: Optional[ExamMode], today: date) -> str:
    mode_part = mode_filter.value if mode_filter is not None else "ALL"
    return f"MedRank_{mode_part}_{today.isoformat()}.xlsx"

class ExportService:
    def export(
        self,
        tests: Sequence[GrandTest],
        category_filter: str = ALL_CATEGORIES,
        mode_filter: Optional[ExamMode] = None,
        today: Optional[date] = None,
    ) -> Tuple[str, bytes]:
        """
        Write the visible tests to a one-sheet workbook.

        Layout: a header row of test names, then for each category a colored
        category row followed by one row per subject. Score cells hold the
        integer percentage and are filled with the band color.
        """
        visible = filter_by_mode(tests, mode_filter)
        if not visible:
            raise ExportError("No data to export.")

        openpyxl, Alignment, Border, Font, PatternFill, Side, get_column_letter = _load_openpyxl()

        def fill(color: str):
            return PatternFill(start_color=color, end_color=color, fill_type="solid")

        thin = Side(style="thin", color="D1D5DB")
        border = Border(left=thin, right=thin, top=thin, bottom=thin)
        center = Alignment(horizontal="center", vertical="center")

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = SHEET_TITLE

        ws.cell(row=1, column=1, value="Subject")
        for col, test in enumerate(visible, start=2):
            ws.cell(row=1, column=col, value=test.name)
        for col in range(1, len(visible) + 2):
            cell = ws.cell(row=1, column=col)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = fill(HEADER_FILL)
            cell.alignment = center
            cell.border = border

        row = 2
        for category in categories_for(category_filter):
            ws.cell(row=row, column=1, value=CATEGORIES[category])
            for col in range(1, len(visible) + 2):
                cell = ws.cell(row=row, column=col)
                cell.font = Font(bold=True)
                cell.fill = fill(CATEGORY_COLORS[category])
                cell.border = border
            row += 1

            for subject in subjects_in(category):
                name_cell = ws.cell(row=row, column=1, value=subject.name)
                name_cell.border = border
                for col, test in enumerate(visible, start=2):
                    percentage = test.percentage_for(subject.id)
                    band = score_service.classify_band(percentage)
                    cell = ws.cell(row=row, column=col, value=percentage)
                    cell.fill = fill(score_service.band_color(band))
                    cell.alignment = center
                    cell.border = border
                row += 1

        ws.column_dimensions["A"].width = 22
        for col in range(2, len(visible) + 2):
            ws.column_dimensions[get_column_letter(col)].width = 14
        ws.freeze_panes = "B2"

        buffer = BytesIO()
        wb.save(buffer)

        filename = export_filename(mode_filter, today or date.today())
        logger.info(f"Exported {len(visible)} test(s) to {filename}.")
        return filename, buffer.getvalue()

export_service = ExportService()
