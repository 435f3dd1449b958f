# export/identifiers.py
from __future__ import annotations

COURSE_GRADE_SUFFIX = "CG"


def section_id(site_id: str) -> str:
    """The section id used for joins is the site id itself."""
    return site_id


def assessment_id(site_id: str, suffix: str) -> str:
    """
    Composite assessment id joining assessments.txt and scores.txt rows.

    >>> assessment_id("BIO101", "Quiz1")
    'BIO101-Quiz1'
    """
    return f"{site_id}-{suffix}"


def course_grade_id(site_id: str) -> str:
    return assessment_id(site_id, COURSE_GRADE_SUFFIX)
