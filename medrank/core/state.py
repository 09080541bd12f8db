"""
Application state and its transitions.

AppState is an immutable snapshot; every transition is a pure function that
returns a new snapshot. Persistence and network calls happen in the
controller, after a transition, never inside one.
"""
from typing import Optional, Tuple

from pydantic import BaseModel

from medrank.core.subjects import ALL_CATEGORIES, categories_for
from medrank.schemas.dashboard import ActiveTab
from medrank.schemas.grand_test import ExamMode, GrandTest
from medrank.services import store


class AppState(BaseModel):
    tests: Tuple[GrandTest, ...] = ()
    active_tab: ActiveTab = ActiveTab.DASHBOARD
    category_filter: str = ALL_CATEGORIES
    mode_filter: Optional[ExamMode] = None
    ai_analysis: str = ""
    is_analyzing: bool = False
    pending_request_id: Optional[str] = None

    class Config:
        frozen = True

    def visible_tests(self) -> Tuple[GrandTest, ...]:
        if self.mode_filter is None:
            return self.tests
        return tuple(test for test in self.tests if test.mode == self.mode_filter)


def tests_loaded(state: AppState, tests) -> AppState:
    return state.model_copy(update={"tests": tuple(tests)})


# Any change to the data invalidates the previous AI report.

def test_added(state: AppState, test: GrandTest) -> AppState:
    return state.model_copy(update={"tests": store.add_test(state.tests, test), "ai_analysis": ""})


def test_updated(state: AppState, test: GrandTest) -> AppState:
    return state.model_copy(update={"tests": store.update_test(state.tests, test.id, test), "ai_analysis": ""})


def test_removed(state: AppState, test_id: str) -> AppState:
    return state.model_copy(update={"tests": store.remove_test(state.tests, test_id), "ai_analysis": ""})


def tab_selected(state: AppState, tab: ActiveTab) -> AppState:
    if tab == state.active_tab:
        return state
    # Navigating away abandons whatever analysis was still in flight
    return analysis_cancelled(state).model_copy(update={"active_tab": tab})


def category_filter_changed(state: AppState, category: str) -> AppState:
    # validates the value; raises ValueError for an unknown category
    categories_for(category)
    return state.model_copy(update={"category_filter": category})


def mode_filter_changed(state: AppState, mode: Optional[ExamMode]) -> AppState:
    return state.model_copy(update={"mode_filter": mode})


def analysis_started(state: AppState, request_id: str) -> AppState:
    return state.model_copy(update={"is_analyzing": True, "pending_request_id": request_id})


def analysis_finished(state: AppState, request_id: str, text: str) -> AppState:
    if state.pending_request_id != request_id:
        # stale result from a superseded or cancelled request
        return state
    return state.model_copy(update={"ai_analysis": text, "is_analyzing": False, "pending_request_id": None})


def analysis_cancelled(state: AppState) -> AppState:
    return state.model_copy(update={"is_analyzing": False, "pending_request_id": None})
