#models.py
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

AcademicTerm = str


@dataclass(frozen=True, slots=True)
class CourseSite:
    id: str
    title: str
    term: Optional[AcademicTerm] = None


@dataclass(frozen=True, slots=True)
class Assignment:
    id: str
    name: str
    points: Optional[float]
    due_date: Optional[date] = None
    counted: bool = True
    external_app_name: Optional[str] = None  # e.g. "Tests & Quizzes"; None for native items


@dataclass(frozen=True, slots=True)
class EligibleUser:
    id: str          # host-internal id, used for gradebook lookups
    eid: str         # stable cross-system id, written to scores.txt
    display_name: str
    last_name: str


@dataclass(frozen=True, slots=True)
class GradeDefinition:
    grade: Optional[str] = None  # numeric or letter, may be empty
    comment: Optional[str] = None
    date_recorded: Optional[datetime] = None


@dataclass(frozen=True, slots=True)
class Gradebook:
    uid: str
    site_id: str
    # letter -> lower threshold; insertion order is kept for legend tie-breaks
    grade_mapping: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class GradeMappingEntry:
    label: str
    threshold: float


@dataclass(frozen=True, slots=True)
class AssessmentRecord:
    external_assessment_id: str
    external_section_id: str
    name: str
    description: str
    due_date: str
    points_possible: str
    is_counted: int
    is_aggregate: int
    reserved_flag: int

    HEADER = (
        "external_assessment_id",
        "external_section_id",
        "name",
        "description",
        "due_date",
        "points_possible",
        "is_counted",
        "is_aggregate",
        "reserved_flag",
    )


@dataclass(frozen=True, slots=True)
class ScoreRecord:
    external_assessment_id: str
    external_section_id: str
    student_external_id: str
    grade: Optional[str]
    comment: str
    graded_timestamp: str

    HEADER = (
        "external_assessment_id",
        "external_section_id",
        "student_external_id",
        "grade",
        "comment",
        "graded_timestamp",
    )


class SkipReason(str, Enum):
    NO_ELIGIBLE_USERS = "no_eligible_users"
    NO_GRADEBOOK = "no_gradebook"
    NO_ASSIGNMENTS = "no_assignments"


@dataclass(frozen=True, slots=True)
class SiteExport:
    """Everything aggregated for one site, in emission order."""
    site: CourseSite
    users: Tuple[EligibleUser, ...] = ()
    assignments: Tuple[Assignment, ...] = ()
    assessments: Tuple[AssessmentRecord, ...] = ()
    scores: Tuple[ScoreRecord, ...] = ()
    # (assignment id, user id) -> grade; feeds the informational report
    grades: Dict[Tuple[str, str], GradeDefinition] = field(default_factory=dict)
    gradebook: Optional[Gradebook] = None


@dataclass(frozen=True, slots=True)
class Processed:
    export: SiteExport

    @property
    def site(self) -> CourseSite:
        return self.export.site


@dataclass(frozen=True, slots=True)
class Skipped:
    site: CourseSite
    reason: SkipReason


@dataclass(frozen=True, slots=True)
class Failed:
    site: CourseSite
    error: Exception
    partial: SiteExport  # records built before the failure


SiteResult = Union[Processed, Skipped, Failed]


@dataclass(frozen=True, slots=True)
class SiteReport:
    site: CourseSite
    header: List[str]
    rows: List[List[str]]
