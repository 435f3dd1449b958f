# export/report.py
"""
Wide per-site gradebook report: one row per student, a grade and a comment
column per assignment, then a legend block (site id, title, grade mapping).

Building and writing are separate steps; the exporter only writes reports
when it has been given a report directory.
"""
from __future__ import annotations

import csv
import io
import logging
from pathlib import Path
from typing import List, Mapping

from export.providers import GradebookProvider
from logging_setup import get_logger
from models import GradeMappingEntry, SiteExport, SiteReport
from utils.fs import atomic_write
from utils.strings import format_number, text_or_empty

STUDENT_ID = "Student ID"
STUDENT_NAME = "Student Name"
COMMENTS = "Comments"
TOTAL_POINTS = "Total Points Earned [Points Possible]"
COURSE_GRADE = "Course Grade"


def sorted_grade_mapping(mapping: Mapping[str, float]) -> List[GradeMappingEntry]:
    """Highest threshold first; equal thresholds keep the mapping's own order."""
    entries = [GradeMappingEntry(label, float(threshold)) for label, threshold in mapping.items()]
    return sorted(entries, key=lambda e: -e.threshold)


def mappings_cell(mapping: Mapping[str, float]) -> str:
    return ",".join(f"{e.label}={format_number(e.threshold)}" for e in sorted_grade_mapping(mapping))


def _pad(row: List[str], width: int) -> List[str]:
    return row + [""] * (width - len(row))


def check_row_width(row: List[str], width: int, log: logging.LoggerAdapter) -> bool:
    """Soft check: a short or long row is logged and kept."""
    if len(row) != width:
        log.error("row not same size as header: %d vs header size of %d", len(row), width)
        return False
    return True


def build_header(export: SiteExport) -> List[str]:
    header = [STUDENT_ID, STUDENT_NAME]
    for a in export.assignments:
        header.append(f"{a.name} [{format_number(a.points)}]")
        header.append(COMMENTS)
    header.append(TOTAL_POINTS)
    header.append(COURSE_GRADE)
    return header


def build_site_report(export: SiteExport, gradebooks: GradebookProvider) -> SiteReport:
    """
    Compute the report for a processed site. Comments come from the
    gradebook provider; total and course grade cells stay blank.
    """
    log = get_logger(artifact="report", site_id=export.site.id)
    if export.gradebook is None:
        raise ValueError(f"site {export.site.id} has no gradebook to report on")

    header = build_header(export)
    width = len(header)
    rows: List[List[str]] = []

    for user in export.users:
        row = [user.eid, user.display_name]
        for a in export.assignments:
            grade = export.grades.get((a.id, user.id))
            row.append(text_or_empty(grade.grade if grade else None))
            row.append(text_or_empty(gradebooks.comment_for(export.gradebook, a, user)))
        # no source for total points or course grade yet
        row.extend(["", ""])

        check_row_width(row, width, log)
        log.debug("row: %s", row)
        rows.append(row)

    rows.append(_pad([], width))
    rows.append(_pad(["Site ID", export.site.id], width))
    rows.append(_pad(["Site Title", export.site.title], width))
    rows.append(_pad(["Mappings", mappings_cell(export.gradebook.grade_mapping)], width))

    return SiteReport(site=export.site, header=header, rows=rows)


def render_site_report(report: SiteReport) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(report.header)
    writer.writerows(report.rows)
    return buf.getvalue()


def report_path(directory: Path, site_id: str) -> Path:
    return Path(directory) / f"{site_id}.csv"


def write_site_report(report: SiteReport, directory: Path) -> Path:
    path = report_path(directory, report.site.id)
    atomic_write(path, render_site_report(report))
    get_logger(artifact="report", site_id=report.site.id).info("wrote report to %s", path)
    return path
