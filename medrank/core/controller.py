import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from medrank.core import state as transitions
from medrank.core.config import settings
from medrank.core.exceptions import FormStateError, TestNotFoundError
from medrank.core.state import AppState
from medrank.core.storage import JsonFileStorage
from medrank.schemas.analysis import AnalysisOutcome
from medrank.schemas.dashboard import ActiveTab
from medrank.schemas.form import FormState, FormStatus, SubjectEntryUpdate, TestDraftUpdate
from medrank.schemas.grand_test import ExamMode, GrandTest
from medrank.services.analysis_service import AnalysisService, analysis_service
from medrank.services.entry_form import EntryForm
from medrank.services.store import TestRecordStore, find_test

logger = logging.getLogger(__name__)

@dataclass
class AnalysisHandle:
    request_id: str
    task: "asyncio.Task[str]"
    cancelled: bool = field(default=False)

    def cancel(self) -> None:
        self.cancelled = True
        self.task.cancel()

class DashboardController:
    """
    Single owner of the application state.

    Every user action goes through one method here: it applies a pure
    transition to the state, then runs the side effect that goes with it
    (persisting the tests, or talking to the AI service).
    """

    def __init__(self, store: TestRecordStore, analyzer: AnalysisService):
        self.store = store
        self.analyzer = analyzer
        self.state = AppState()
        self.form = EntryForm()
        self._inflight: Optional[AnalysisHandle] = None

    def load(self) -> None:
        self.state = transitions.tests_loaded(self.state, self.store.load())

    @property
    def tests(self):
        return self.state.tests

    def get_test(self, test_id: str) -> GrandTest:
        test = find_test(self.state.tests, test_id)
        if test is None:
            raise TestNotFoundError(test_id)
        return test

    def _commit(self, new_state: AppState) -> None:
        self.state = new_state
        self.store.persist(self.state.tests)

    # Entry form

    def open_form(self, test_id: Optional[str] = None, today: Optional[date] = None) -> FormState:
        if test_id is None:
            return self.form.open_create(len(self.state.tests), today)
        return self.form.open_edit(self.get_test(test_id))

    def update_form_subject(self, subject_id: str, update: SubjectEntryUpdate) -> FormState:
        return self.form.update_subject(subject_id, update)

    def apply_form(self, update: TestDraftUpdate) -> FormState:
        return self.form.apply(update)

    def save_form(self) -> GrandTest:
        editing = self.form.status == FormStatus.EDIT
        editing_id = self.form.test_id
        if editing and find_test(self.state.tests, editing_id) is None:
            # the record was deleted while its form was open
            self.form.close()
            raise TestNotFoundError(editing_id)

        test = self.form.submit()
        if editing:
            self._commit(transitions.test_updated(self.state, test))
            logger.info(f"Updated test {test.id} ({test.name}).")
        else:
            self._commit(transitions.test_added(self.state, test))
            logger.info(f"Added test {test.id} ({test.name}).")
        return test

    def close_form(self) -> None:
        self.form.close()

    def _apply_and_save(self, draft: TestDraftUpdate) -> GrandTest:
        try:
            self.apply_form(draft)
            return self.save_form()
        except Exception:
            # a rejected one-step save must not leave the form open
            self.form.close()
            raise

    def create_test(self, draft: TestDraftUpdate, today: Optional[date] = None) -> GrandTest:
        if self.form.is_open:
            raise FormStateError("Another test is being edited; close the form first")
        self.open_form(today=today)
        return self._apply_and_save(draft)

    def edit_test(self, test_id: str, draft: TestDraftUpdate) -> GrandTest:
        if self.form.is_open:
            raise FormStateError("Another test is being edited; close the form first")
        self.open_form(test_id)
        return self._apply_and_save(draft)

    def delete_test(self, test_id: str) -> None:
        self.get_test(test_id)
        self._commit(transitions.test_removed(self.state, test_id))
        logger.info(f"Deleted test {test_id}.")

    # UI state

    def select_tab(self, tab: ActiveTab) -> AppState:
        if tab != self.state.active_tab:
            self._cancel_inflight()
        self.state = transitions.tab_selected(self.state, tab)
        return self.state

    def set_category_filter(self, category: str) -> AppState:
        self.state = transitions.category_filter_changed(self.state, category)
        return self.state

    def set_mode_filter(self, mode: Optional[ExamMode]) -> AppState:
        self.state = transitions.mode_filter_changed(self.state, mode)
        return self.state

    # AI analysis

    def _cancel_inflight(self) -> None:
        if self._inflight is not None and not self._inflight.task.done():
            logger.info(f"Discarding analysis request {self._inflight.request_id}.")
            self._inflight.cancel()
        self._inflight = None

    def cancel_analysis(self) -> AppState:
        self._cancel_inflight()
        self.state = transitions.analysis_cancelled(self.state)
        return self.state

    async def request_analysis(self) -> AnalysisOutcome:
        """
        Run one analysis request. A newer request, a tab change or an explicit
        cancel discards this one; its result is then never applied.
        """
        self._cancel_inflight()

        request_id = uuid.uuid4().hex
        self.state = transitions.analysis_started(self.state, request_id)
        handle = AnalysisHandle(
            request_id=request_id,
            task=asyncio.ensure_future(self.analyzer.analyze_performance(self.state.tests)),
        )
        self._inflight = handle

        try:
            text = await handle.task
        except asyncio.CancelledError:
            if not handle.cancelled:
                # cancelled from outside (client gone, shutdown): release the trigger
                if self.state.pending_request_id == request_id:
                    self.state = transitions.analysis_cancelled(self.state)
                handle.task.cancel()
                raise
            return AnalysisOutcome(request_id=request_id, text=None, applied=False)
        finally:
            if self._inflight is handle:
                self._inflight = None

        applied = self.state.pending_request_id == request_id
        self.state = transitions.analysis_finished(self.state, request_id, text)
        return AnalysisOutcome(request_id=request_id, text=text, applied=applied)

class ControllerManager:
    controller: Optional[DashboardController] = None

    @classmethod
    def get_controller(cls) -> DashboardController:
        if cls.controller is None:
            storage = JsonFileStorage(settings.DATA_FILE)
            cls.controller = DashboardController(
                store=TestRecordStore(storage, settings.STORAGE_KEY),
                analyzer=analysis_service,
            )
            cls.controller.load()
            logger.info(f"Dashboard controller initialized with {len(cls.controller.tests)} test(s).")
        return cls.controller

# Global instance to access the controller
dashboard = ControllerManager()
