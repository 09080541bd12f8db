"""
Entry form for one Grand Test.

The form is a small state machine: CLOSED -> CREATE | EDIT -> CLOSED.
While open it holds a draft with one row per catalog subject. In NEET PG and
INI CET modes the obtained/total marks of a row are derived from the
correct/wrong counts; in direct-entry (CUSTOM) mode they are typed in.
Saving recomputes every row and emits one complete GrandTest.
"""
import logging
import uuid
from datetime import date
from typing import Optional

from medrank.core.exceptions import FormStateError, SubjectNotFoundError
from medrank.core.subjects import SUBJECTS, get_subject
from medrank.schemas.form import (
    FormState,
    FormStatus,
    SubjectEntry,
    SubjectEntryUpdate,
    TestDraft,
    TestDraftUpdate,
)
from medrank.schemas.grand_test import ExamMode, GrandTest, SubjectScore
from medrank.services.score_service import score_service

logger = logging.getLogger(__name__)

# Max gap between stored obtained marks and the marks recomputed from counts
# for a record to still count as count-derived.
DIRECT_ENTRY_TOLERANCE = 0.1

def is_direct_entry(score: SubjectScore, mode: ExamMode) -> bool:
    """True if the stored obtained marks were typed in rather than derived from counts."""
    if mode == ExamMode.CUSTOM:
        return True
    expected, _ = score_service.calculate_marks(score.correct or 0, score.wrong or 0, mode)
    # rounded so that a gap of exactly 0.1 is not inflated by float error
    return round(abs(expected - score.obtained_marks), 9) > DIRECT_ENTRY_TOLERANCE

def detect_form_mode(test: GrandTest) -> ExamMode:
    if test.mode == ExamMode.CUSTOM:
        return ExamMode.CUSTOM
    for score in test.scores.values():
        if is_direct_entry(score, test.mode):
            return ExamMode.CUSTOM
    return test.mode

def _recalculated(entry: SubjectEntry, mode: ExamMode) -> SubjectEntry:
    if mode == ExamMode.CUSTOM:
        return entry
    obtained, total = score_service.calculate_marks(entry.correct, entry.wrong, mode)
    return entry.model_copy(update={"obtained": obtained, "total": total})

class EntryForm:
    def __init__(self):
        self.status = FormStatus.CLOSED
        self.test_id: Optional[str] = None
        self.draft: Optional[TestDraft] = None

    @property
    def is_open(self) -> bool:
        return self.status != FormStatus.CLOSED

    def state(self) -> FormState:
        return FormState(status=self.status, test_id=self.test_id, draft=self.draft)

    def open_create(self, test_count: int, today: Optional[date] = None) -> FormState:
        today = today or date.today()
        self.status = FormStatus.CREATE
        self.test_id = None
        self.draft = TestDraft(
            name=f"GT{test_count + 1}",
            date=today.isoformat(),
            mode=ExamMode.NEET_PG,
            subjects={subject.id: SubjectEntry() for subject in SUBJECTS},
        )
        return self.state()

    def open_edit(self, test: GrandTest) -> FormState:
        subjects = {}
        for subject in SUBJECTS:
            existing = test.scores.get(subject.id)
            if existing is None:
                subjects[subject.id] = SubjectEntry()
                continue
            subjects[subject.id] = SubjectEntry(
                correct=existing.correct or 0,
                wrong=existing.wrong or 0,
                unattempted=existing.unattempted,
                obtained=existing.obtained_marks,
                total=existing.total_marks,
            )

        mode = detect_form_mode(test)
        if mode != test.mode:
            logger.info(f"Test {test.id} does not match its {test.mode.value} formula, editing as direct entry.")

        self.status = FormStatus.EDIT
        self.test_id = test.id
        self.draft = TestDraft(name=test.name, date=test.date, mode=mode, subjects=subjects)
        return self.state()

    def _require_open(self) -> TestDraft:
        if not self.is_open or self.draft is None:
            raise FormStateError("Entry form is not open")
        return self.draft

    def update_subject(self, subject_id: str, update: SubjectEntryUpdate) -> FormState:
        draft = self._require_open()
        if get_subject(subject_id) is None:
            raise SubjectNotFoundError(subject_id)

        changes = update.model_dump(exclude_unset=True, exclude_none=True)
        if draft.mode != ExamMode.CUSTOM:
            # obtained/total are read-only while they are derived from counts
            changes.pop("obtained", None)
            changes.pop("total", None)

        entry = draft.subjects.get(subject_id, SubjectEntry()).model_copy(update=changes)
        draft.subjects[subject_id] = _recalculated(entry, draft.mode)
        return self.state()

    def apply(self, update: TestDraftUpdate) -> FormState:
        draft = self._require_open()
        for subject_id in update.subjects:
            if get_subject(subject_id) is None:
                raise SubjectNotFoundError(subject_id)

        if update.name is not None:
            draft.name = update.name
        if update.date is not None:
            draft.date = update.date
        if update.mode is not None:
            draft.mode = update.mode

        draft.subjects.update(update.subjects)
        draft.subjects = {
            subject.id: _recalculated(draft.subjects.get(subject.id, SubjectEntry()), draft.mode)
            for subject in SUBJECTS
        }
        return self.state()

    def submit(self) -> GrandTest:
        """Build the complete record from the draft and close the form."""
        draft = self._require_open()

        scores = {}
        for subject in SUBJECTS:
            entry = draft.subjects.get(subject.id, SubjectEntry())
            scores[subject.id] = score_service.build_subject_score(
                subject.id,
                draft.mode,
                correct=entry.correct,
                wrong=entry.wrong,
                obtained=entry.obtained,
                total=entry.total,
                unattempted=entry.unattempted,
            )

        test = GrandTest(
            id=self.test_id if self.status == FormStatus.EDIT else str(uuid.uuid4()),
            name=draft.name,
            date=draft.date,
            mode=draft.mode,
            scores=scores,
        )
        self.close()
        return test

    def close(self) -> None:
        self.status = FormStatus.CLOSED
        self.test_id = None
        self.draft = None
