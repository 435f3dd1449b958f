# tests/conftest.py
from __future__ import annotations

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from export.errors import GradebookNotFound  # noqa: E402
from logging_setup import LOGGER_NAME  # noqa: E402
from models import (  # noqa: E402
    Assignment,
    CourseSite,
    EligibleUser,
    GradeDefinition,
    Gradebook,
)


# ---------- the host test double ----------
class FakeHost:
    """
    In-memory stand-in for every host contract (terms, sites, enrollment, gradebook).

    Records calls in `calls` so tests can assert on lookup order, and can be told
    to blow up on specific (site, assignment) grade lookups.
    """

    def __init__(self) -> None:
        self.terms: List[str] = []
        self.sites: Dict[str, List[CourseSite]] = {}
        self.users: Dict[str, List[EligibleUser]] = {}
        self.gradebooks: Dict[str, Gradebook] = {}
        self.assignment_lists: Dict[str, List[Assignment]] = {}
        self.grades: Dict[Tuple[str, str, str], GradeDefinition] = {}
        self.comments: Dict[Tuple[str, str, str], str] = {}
        self.failing_grades: Set[Tuple[str, str]] = set()
        self.failing_users: Set[str] = set()
        self.calls: List[tuple] = []

    # ----- builders -----
    def add_site(self, term: str, site_id: str, title: str = "", *, users: Iterable[EligibleUser] = (),
                 assignments: Optional[Iterable[Assignment]] = None,
                 mapping: Optional[Dict[str, float]] = None) -> CourseSite:
        site = CourseSite(id=site_id, title=title or site_id, term=term)
        self.sites.setdefault(term, []).append(site)
        self.users[site_id] = list(users)
        if assignments is not None:
            uid = f"gb-{site_id}"
            self.gradebooks[site_id] = Gradebook(uid=uid, site_id=site_id, grade_mapping=dict(mapping or {}))
            self.assignment_lists[uid] = list(assignments)
        return site

    def set_grade(self, site_id: str, assignment_id: str, user_id: str, grade: Optional[str],
                  recorded: Optional[datetime] = None, comment: Optional[str] = None) -> None:
        key = (f"gb-{site_id}", assignment_id, user_id)
        self.grades[key] = GradeDefinition(grade=grade, comment=comment, date_recorded=recorded)
        if comment is not None:
            self.comments[key] = comment

    # ----- TermProvider -----
    def current_terms(self):
        self.calls.append(("current_terms",))
        return list(self.terms)

    # ----- SiteDirectory -----
    def find_sites(self, term):
        self.calls.append(("find_sites", term))
        return sorted(self.sites.get(term, []), key=lambda s: s.id)

    def is_personal_or_system_site(self, site_id):
        return site_id.startswith("~") or site_id.startswith("!")

    # ----- EnrollmentDirectory -----
    def eligible_users(self, site, permission):
        self.calls.append(("eligible_users", site.id, permission))
        if site.id in self.failing_users:
            raise RuntimeError(f"enrollment lookup failed for {site.id}")
        return list(self.users.get(site.id, []))

    # ----- GradebookProvider -----
    def gradebook_for(self, site):
        self.calls.append(("gradebook_for", site.id))
        if site.id not in self.gradebooks:
            raise GradebookNotFound(site.id)
        return self.gradebooks[site.id]

    def assignments(self, gradebook):
        self.calls.append(("assignments", gradebook.uid))
        return list(self.assignment_lists.get(gradebook.uid, []))

    def grade_for(self, gradebook, assignment, user):
        self.calls.append(("grade_for", gradebook.uid, assignment.id, user.id))
        if (gradebook.site_id, assignment.id) in self.failing_grades:
            raise RuntimeError(f"grade lookup failed for {assignment.id}")
        return self.grades.get((gradebook.uid, assignment.id, user.id), GradeDefinition())

    def comment_for(self, gradebook, assignment, user):
        self.calls.append(("comment_for", gradebook.uid, assignment.id, user.id))
        return self.comments.get((gradebook.uid, assignment.id, user.id))


def user(uid: str, eid: str, first: str, last: str) -> EligibleUser:
    return EligibleUser(id=uid, eid=eid, display_name=f"{first} {last}", last_name=last)


ADAMS = user("u-1", "aadams", "Ann", "Adams")
ZIMMERMAN = user("u-2", "zzim", "Zoe", "Zimmerman")
QUIZ1 = Assignment(id="Quiz1", name="Quiz 1", points=5.0, due_date=None, counted=True)


# ---------- common fixtures ----------
@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def bio101_host() -> FakeHost:
    """FA24 with one course site, two students (fetched Z before A) and one quiz."""
    h = FakeHost()
    h.terms = ["FA24"]
    h.add_site(
        "FA24", "BIO101", "Intro Biology",
        users=[ZIMMERMAN, ADAMS],
        assignments=[QUIZ1],
        mapping={"A": 90.0, "B": 80.0, "C": 70.0, "D": 60.0, "F": 0.0},
    )
    h.set_grade("BIO101", "Quiz1", "u-1", "4.5", recorded=datetime(2024, 9, 3, 14, 5, 9), comment="Nice work")
    h.set_grade("BIO101", "Quiz1", "u-2", None)
    return h


@pytest.fixture
def export_caplog(caplog):
    """
    Attach caplog to the project logger; setup_logging() turns propagation off,
    so root-level capture alone misses our records.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.addHandler(caplog.handler)
    try:
        yield caplog
    finally:
        logger.removeHandler(caplog.handler)
