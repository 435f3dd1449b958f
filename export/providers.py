# export/providers.py
"""
Contracts for the host services the exporter reads from.

The exporter never talks to the host directly; it is handed objects that
satisfy these protocols. `export.host.HostDirectory` implements all four over
the host's REST API, tests use in-memory doubles.
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Protocol

from models import (
    AcademicTerm,
    Assignment,
    CourseSite,
    EligibleUser,
    GradeDefinition,
    Gradebook,
)

VIEW_OWN_GRADES = "gradebook.viewOwnGrades"


class TermProvider(Protocol):
    def current_terms(self) -> Iterable[AcademicTerm]:
        """Currently active term codes. May be empty, never None."""
        ...


class SiteDirectory(Protocol):
    def find_sites(self, term: AcademicTerm) -> List[CourseSite]:
        """Sites whose term_eid equals `term`, ascending by site id."""
        ...

    def is_personal_or_system_site(self, site_id: str) -> bool:
        ...


class EnrollmentDirectory(Protocol):
    def eligible_users(self, site: CourseSite, permission: str) -> List[EligibleUser]:
        ...


class GradebookProvider(Protocol):
    def gradebook_for(self, site: CourseSite) -> Gradebook:
        """Raises export.errors.GradebookNotFound when the site has none."""
        ...

    def assignments(self, gradebook: Gradebook) -> List[Assignment]:
        ...

    def grade_for(self, gradebook: Gradebook, assignment: Assignment, user: EligibleUser) -> GradeDefinition:
        ...

    def comment_for(self, gradebook: Gradebook, assignment: Assignment, user: EligibleUser) -> Optional[str]:
        ...
