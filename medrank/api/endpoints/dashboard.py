from typing import Optional
from fastapi import APIRouter, Depends, HTTPException

from medrank.api.deps import get_controller
from medrank.core.controller import DashboardController
from medrank.core.state import AppState
from medrank.schemas.common import UIState
from medrank.schemas.dashboard import FilterUpdate, Scoreboard, TabUpdate
from medrank.schemas.grand_test import ExamMode
from medrank.services.dashboard_service import dashboard_service

router = APIRouter()

def _ui_state(state: AppState) -> UIState:
    return UIState(
        active_tab=state.active_tab.value,
        category_filter=state.category_filter,
        mode_filter=state.mode_filter.value if state.mode_filter else None,
        is_analyzing=state.is_analyzing,
        test_count=len(state.tests),
    )

@router.get("/dashboard", response_model=Scoreboard)
async def read_dashboard(
    category: Optional[str] = None,
    mode: Optional[ExamMode] = None,
    controller: DashboardController = Depends(get_controller),
) -> Scoreboard:
    """
    Color-coded subject x test scoreboard.

    - **category**: ALL or one category; defaults to the current UI filter.
    - **mode**: only show tests of this exam mode; defaults to the current UI filter.
    """
    state = controller.state
    try:
        return dashboard_service.render(
            state.tests,
            category_filter=category or state.category_filter,
            mode_filter=mode or state.mode_filter,
        )
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Unknown category: {category}")

@router.get("/ui", response_model=UIState)
async def read_ui_state(controller: DashboardController = Depends(get_controller)) -> UIState:
    return _ui_state(controller.state)

@router.put("/ui/filters", response_model=UIState)
async def update_filters(
    update: FilterUpdate,
    controller: DashboardController = Depends(get_controller),
) -> UIState:
    if update.category is not None:
        try:
            controller.set_category_filter(update.category)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown category: {update.category}")
    if update.clear_mode:
        controller.set_mode_filter(None)
    elif update.mode is not None:
        controller.set_mode_filter(update.mode)
    return _ui_state(controller.state)

@router.put("/ui/tab", response_model=UIState)
async def select_tab(
    update: TabUpdate,
    controller: DashboardController = Depends(get_controller),
) -> UIState:
    """
    Switch between the dashboard and the AI coach. Switching tabs discards
    any analysis still in flight.
    """
    return _ui_state(controller.select_tab(update.tab))
