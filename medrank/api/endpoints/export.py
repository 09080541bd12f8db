import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.core.exceptions import ExportError, ExportUnavailableError
from medrank.schemas.grand_test import ExamMode
from medrank.services.export_service import XLSX_MEDIA_TYPE, export_service

router = APIRouter()
logger = logging.getLogger(__name__)

@router.get("/", response_class=Response)
async def export_scores(
    category: Optional[str] = None,
    mode: Optional[ExamMode] = None,
    controller: DashboardController = Depends(get_controller),
) -> Response:
    """
    Download the currently filtered scoreboard as an .xlsx workbook.
    """
    state = controller.state
    try:
        filename, content = export_service.export(
            state.tests,
            category_filter=category or state.category_filter,
            mode_filter=mode or state.mode_filter,
        )
    except ExportUnavailableError as e:
        logger.error(f"Export failed: {e}")
        raise HTTPException(status_code=503, detail=str(e))
    except ExportError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
