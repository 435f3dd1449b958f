# export/host.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

from export.errors import GradebookNotFound
from models import (
    AcademicTerm,
    Assignment,
    CourseSite,
    EligibleUser,
    GradeDefinition,
    Gradebook,
)
from utils.api import HostAPI
from utils.dates import parse_date, parse_timestamp

USER_SITE_PREFIX = "~"
SPECIAL_SITE_PREFIX = "!"


def _status(exc: requests.HTTPError) -> Optional[int]:
    return getattr(exc.response, "status_code", None)


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _points(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def site_from_json(data: Dict[str, Any]) -> CourseSite:
    return CourseSite(
        id=str(data["id"]),
        title=data.get("title") or "",
        term=_str_or_none(data.get("term_eid")),
    )


def user_from_json(data: Dict[str, Any]) -> EligibleUser:
    return EligibleUser(
        id=str(data["id"]),
        eid=str(data.get("eid") or data["id"]),
        display_name=data.get("display_name") or "",
        last_name=data.get("last_name") or "",
    )


def assignment_from_json(data: Dict[str, Any]) -> Assignment:
    return Assignment(
        id=str(data["id"]),
        name=data.get("name") or "",
        points=_points(data.get("points")),
        due_date=parse_date(data.get("due_date")),
        counted=bool(data.get("counted", True)),
        external_app_name=data.get("external_app_name") or None,
    )


def grade_from_json(data: Dict[str, Any]) -> GradeDefinition:
    return GradeDefinition(
        grade=_str_or_none(data.get("grade")),
        comment=data.get("comment"),
        date_recorded=parse_timestamp(data.get("date_recorded")),
    )


class HostDirectory:
    """
    All four host contracts (terms, sites, enrollment, gradebook) over HostAPI.

    Endpoints (relative to the API root):
      terms/current
      sites?term_eid=...&sort=id_asc
      sites/{site_id}/users?permission=...
      sites/{site_id}/gradebook
      gradebooks/{uid}/assignments
      gradebooks/{uid}/assignments/{assignment_id}/grades/{user_id}
      gradebooks/{uid}/assignments/{assignment_id}/comments/{user_id}
    """

    def __init__(self, api: HostAPI) -> None:
        self.api = api

    # ---- TermProvider ------------------------------------------------------

    def current_terms(self) -> List[AcademicTerm]:
        sessions = self.api.get_list("terms/current")
        return [str(s["eid"]) for s in sessions if s.get("eid")]

    # ---- SiteDirectory -----------------------------------------------------

    def find_sites(self, term: AcademicTerm) -> List[CourseSite]:
        items = self.api.get_list("sites", params={"term_eid": term, "sort": "id_asc"})
        return [site_from_json(s) for s in items]

    def is_personal_or_system_site(self, site_id: str) -> bool:
        return site_id.startswith(USER_SITE_PREFIX) or site_id.startswith(SPECIAL_SITE_PREFIX)

    # ---- EnrollmentDirectory -----------------------------------------------

    def eligible_users(self, site: CourseSite, permission: str) -> List[EligibleUser]:
        items = self.api.get_list(f"sites/{site.id}/users", params={"permission": permission})
        return [user_from_json(u) for u in items]

    # ---- GradebookProvider -------------------------------------------------

    def gradebook_for(self, site: CourseSite) -> Gradebook:
        try:
            data = self.api.get_object(f"sites/{site.id}/gradebook")
        except requests.HTTPError as e:
            if _status(e) == 404:
                raise GradebookNotFound(site.id) from e
            raise
        if not data:
            raise GradebookNotFound(site.id)
        mapping = data.get("grade_mapping") or {}
        return Gradebook(
            uid=str(data["uid"]),
            site_id=site.id,
            grade_mapping={str(k): float(v) for k, v in mapping.items()},
        )

    def assignments(self, gradebook: Gradebook) -> List[Assignment]:
        items = self.api.get_list(f"gradebooks/{gradebook.uid}/assignments")
        return [assignment_from_json(a) for a in items]

    def grade_for(self, gradebook: Gradebook, assignment: Assignment, user: EligibleUser) -> GradeDefinition:
        data = self.api.get_object(
            f"gradebooks/{gradebook.uid}/assignments/{assignment.id}/grades/{user.id}"
        )
        return grade_from_json(data)

    def comment_for(self, gradebook: Gradebook, assignment: Assignment, user: EligibleUser) -> Optional[str]:
        try:
            data = self.api.get_object(
                f"gradebooks/{gradebook.uid}/assignments/{assignment.id}/comments/{user.id}"
            )
        except requests.HTTPError as e:
            if _status(e) == 404:
                return None
            raise
        return data.get("comment_text")
