# export/aggregate.py
from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from export.errors import GradebookNotFound
from export.identifiers import assessment_id, course_grade_id, section_id
from export.providers import VIEW_OWN_GRADES, EnrollmentDirectory, GradebookProvider
from logging_setup import get_logger
from models import (
    AssessmentRecord,
    Assignment,
    CourseSite,
    EligibleUser,
    Failed,
    GradeDefinition,
    Gradebook,
    Processed,
    ScoreRecord,
    SiteExport,
    SiteResult,
    SkipReason,
    Skipped,
)
from utils.dates import format_date, format_timestamp
from utils.strings import format_number

COURSE_GRADE_NAME = "Course Grade"
COURSE_GRADE_DESCRIPTION = "Calculated Course Grade"
COURSE_GRADE_POINTS = "100"


def sort_by_last_name(users: Sequence[EligibleUser]) -> List[EligibleUser]:
    """Ordinal last-name order; sorted() is stable so ties keep fetch order."""
    return sorted(users, key=lambda u: u.last_name)


def assessment_record(site_id: str, assignment: Assignment) -> AssessmentRecord:
    description = f"From {assignment.external_app_name}" if assignment.external_app_name else ""
    return AssessmentRecord(
        external_assessment_id=assessment_id(site_id, assignment.id),
        external_section_id=section_id(site_id),
        name=assignment.name,
        description=description,
        due_date=format_date(assignment.due_date),
        points_possible=format_number(assignment.points),
        is_counted=1 if assignment.counted else 0,
        is_aggregate=0,
        reserved_flag=0,
    )


def course_grade_record(site_id: str) -> AssessmentRecord:
    return AssessmentRecord(
        external_assessment_id=course_grade_id(site_id),
        external_section_id=section_id(site_id),
        name=COURSE_GRADE_NAME,
        description=COURSE_GRADE_DESCRIPTION,
        due_date="",
        points_possible=COURSE_GRADE_POINTS,
        is_counted=0,
        is_aggregate=1,
        reserved_flag=1,
    )


def score_record(site_id: str, assignment: Assignment, user: EligibleUser, grade: GradeDefinition) -> ScoreRecord:
    # comment intentionally blank in the flat export; the wide report carries comments
    return ScoreRecord(
        external_assessment_id=assessment_id(site_id, assignment.id),
        external_section_id=section_id(site_id),
        student_external_id=user.eid,
        grade=grade.grade,
        comment="",
        graded_timestamp=format_timestamp(grade.date_recorded),
    )


class _SiteBuffer:
    """Records for one site, in emission order."""

    def __init__(self, site: CourseSite) -> None:
        self.site = site
        self.users: List[EligibleUser] = []
        self.assignments: List[Assignment] = []
        self.assessments: List[AssessmentRecord] = []
        self.scores: List[ScoreRecord] = []
        self.grades: Dict[Tuple[str, str], GradeDefinition] = {}
        self.gradebook: Optional[Gradebook] = None

    def freeze(self) -> SiteExport:
        return SiteExport(
            site=self.site,
            users=tuple(self.users),
            assignments=tuple(self.assignments),
            assessments=tuple(self.assessments),
            scores=tuple(self.scores),
            grades=dict(self.grades),
            gradebook=self.gradebook,
        )


def aggregate_site(
    site: CourseSite,
    enrollment: EnrollmentDirectory,
    gradebooks: GradebookProvider,
) -> SiteResult:
    """
    Build the assessment and score records for one site.

    Returns Skipped when the site has no eligible users, no gradebook or no
    assignments; Failed (carrying whatever was built so far) on any other
    error; Processed otherwise. Never raises.
    """
    log = get_logger(artifact="aggregate", site_id=site.id)
    buf = _SiteBuffer(site)
    log.debug("processing site: %s - %s", site.id, site.title)

    try:
        buf.users = sort_by_last_name(enrollment.eligible_users(site, VIEW_OWN_GRADES) or [])
        if not buf.users:
            log.info("no users in site, skipping")
            return Skipped(site, SkipReason.NO_ELIGIBLE_USERS)

        try:
            buf.gradebook = gradebooks.gradebook_for(site)
        except GradebookNotFound:
            log.info("no gradebook for site, skipping")
            return Skipped(site, SkipReason.NO_GRADEBOOK)

        fetched = gradebooks.assignments(buf.gradebook) or []
        if not fetched:
            log.info("no assignments for site, skipping")
            return Skipped(site, SkipReason.NO_ASSIGNMENTS)
        log.debug("assignments size: %d", len(fetched))

        for a in fetched:
            buf.assignments.append(a)
            record = assessment_record(site.id, a)
            log.debug("assessment: %s", record)
            buf.assessments.append(record)

            for u in buf.users:
                grade = gradebooks.grade_for(buf.gradebook, a, u) or GradeDefinition()
                buf.grades[(a.id, u.id)] = grade
                buf.scores.append(score_record(site.id, a, u, grade))

        buf.assessments.append(course_grade_record(site.id))
    except Exception as e:
        log.error("problem while processing site", exc_info=True, extra={"error": str(e)})
        return Failed(site, e, buf.freeze())

    log.info(
        "site processed",
        extra={"users": len(buf.users), "assessments": len(buf.assessments), "scores": len(buf.scores)},
    )
    return Processed(buf.freeze())
