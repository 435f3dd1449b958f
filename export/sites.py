# export/sites.py
from __future__ import annotations

from typing import List

from export.providers import SiteDirectory
from logging_setup import get_logger
from models import AcademicTerm, CourseSite


def select_sites(term: AcademicTerm, directory: SiteDirectory) -> List[CourseSite]:
    """
    Course sites for `term` in ascending id order, minus personal workspaces
    and special/administrative sites.
    """
    log = get_logger(artifact="sites")

    sites: List[CourseSite] = []
    for site in directory.find_sites(term):
        if directory.is_personal_or_system_site(site.id):
            log.debug("filtered site", extra={"term": term, "filtered": site.id})
            continue
        sites.append(site)

    log.info("sites to process for term %s: %d", term, len(sites))
    return sites
