"""
Static subject catalog for NEET PG / INI CET preparation.

Subjects are grouped into three fixed importance tiers. The catalog order is
the display order used by the dashboard, the export and the AI prompt.
"""
from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel


class SubjectCategory(str, Enum):
    RANK_BUILDING = "RANK_BUILDING"
    RANK_MAINTAINING = "RANK_MAINTAINING"
    RANK_DECIDING = "RANK_DECIDING"


ALL_CATEGORIES = "ALL"

CATEGORIES: Dict[SubjectCategory, str] = {
    SubjectCategory.RANK_BUILDING: "Rank Building",
    SubjectCategory.RANK_MAINTAINING: "Rank Maintaining",
    SubjectCategory.RANK_DECIDING: "Rank Deciding",
}


class Subject(BaseModel):
    id: str
    name: str
    category: SubjectCategory

    class Config:
        frozen = True


def _subject(subject_id: str, name: str, category: SubjectCategory) -> Subject:
    return Subject(id=subject_id, name=name, category=category)


SUBJECTS: List[Subject] = [
    # Rank Building
    _subject("anat", "Anatomy", SubjectCategory.RANK_BUILDING),
    _subject("physio", "Physiology", SubjectCategory.RANK_BUILDING),
    _subject("biochem", "Biochemistry", SubjectCategory.RANK_BUILDING),
    _subject("patho", "Pathology", SubjectCategory.RANK_BUILDING),
    _subject("micro", "Microbiology", SubjectCategory.RANK_BUILDING),
    _subject("pharma", "Pharmacology", SubjectCategory.RANK_BUILDING),
    _subject("fmt", "FMT", SubjectCategory.RANK_BUILDING),
    _subject("paeds", "Pediatrics", SubjectCategory.RANK_BUILDING),
    # Rank Maintaining
    _subject("med", "Medicine", SubjectCategory.RANK_MAINTAINING),
    _subject("surg", "Surgery", SubjectCategory.RANK_MAINTAINING),
    _subject("obg", "OBG", SubjectCategory.RANK_MAINTAINING),
    _subject("psm", "PSM", SubjectCategory.RANK_MAINTAINING),
    # Rank Deciding
    _subject("eye", "Ophthalmology", SubjectCategory.RANK_DECIDING),
    _subject("ent", "ENT", SubjectCategory.RANK_DECIDING),
    _subject("ortho", "Orthopedics", SubjectCategory.RANK_DECIDING),
    _subject("derma", "Dermatology", SubjectCategory.RANK_DECIDING),
    _subject("psych", "Psychiatry", SubjectCategory.RANK_DECIDING),
    _subject("radio", "Radiology", SubjectCategory.RANK_DECIDING),
    _subject("anaes", "Anesthesia", SubjectCategory.RANK_DECIDING),
]

_SUBJECTS_BY_ID: Dict[str, Subject] = {subject.id: subject for subject in SUBJECTS}


def get_subject(subject_id: str) -> Optional[Subject]:
    return _SUBJECTS_BY_ID.get(subject_id)


def subjects_in(category: SubjectCategory) -> List[Subject]:
    return [subject for subject in SUBJECTS if subject.category == category]


def categories_for(category_filter: Union[SubjectCategory, str, None]) -> List[SubjectCategory]:
    """
    Resolve a dashboard filter into the ordered list of categories to show.
    `None` and "ALL" both mean every category.
    """
    if category_filter is None or category_filter == ALL_CATEGORIES:
        return list(CATEGORIES)
    return [SubjectCategory(category_filter)]
