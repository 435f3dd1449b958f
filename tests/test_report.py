# tests/test_report.py
from __future__ import annotations

import logging
from pathlib import Path

import pytest

from export.aggregate import aggregate_site
from export.report import (
    build_site_report,
    check_row_width,
    mappings_cell,
    sorted_grade_mapping,
    write_site_report,
)
from logging_setup import LOGGER_NAME, get_logger
from models import Assignment, SiteExport


def _bio101_export(host):
    site = host.sites["FA24"][0]
    return aggregate_site(site, host, host).export


def test_header_layout(bio101_host):
    report = build_site_report(_bio101_export(bio101_host), bio101_host)
    assert report.header == [
        "Student ID",
        "Student Name",
        "Quiz 1 [5]",
        "Comments",
        "Total Points Earned [Points Possible]",
        "Course Grade",
    ]


def test_rows_carry_grades_and_comments_in_user_order(bio101_host):
    report = build_site_report(_bio101_export(bio101_host), bio101_host)

    assert report.rows[0] == ["aadams", "Ann Adams", "4.5", "Nice work", "", ""]
    assert report.rows[1] == ["zzim", "Zoe Zimmerman", "", "", "", ""]


def test_every_row_is_padded_to_header_width(bio101_host):
    report = build_site_report(_bio101_export(bio101_host), bio101_host)
    assert all(len(row) == len(report.header) for row in report.rows)


def test_legend_block(bio101_host):
    report = build_site_report(_bio101_export(bio101_host), bio101_host)
    spacer, site_id, title, mappings = report.rows[-4:]

    assert spacer == [""] * 6
    assert site_id == ["Site ID", "BIO101", "", "", "", ""]
    assert title == ["Site Title", "Intro Biology", "", "", "", ""]
    assert mappings == ["Mappings", "A=90,B=80,C=70,D=60,F=0", "", "", "", ""]


def test_grade_mapping_sorted_by_threshold_descending():
    mapping = {"C": 70.0, "A+": 97.5, "B": 80.0, "A": 93.0}
    assert [e.label for e in sorted_grade_mapping(mapping)] == ["A+", "A", "B", "C"]
    assert mappings_cell(mapping) == "A+=97.5,A=93,B=80,C=70"


def test_grade_mapping_ties_keep_insertion_order():
    mapping = {"P": 50.0, "S": 50.0, "F": 0.0}
    assert [e.label for e in sorted_grade_mapping(mapping)] == ["P", "S", "F"]


def test_row_width_mismatch_is_logged_not_fatal(export_caplog):
    log = get_logger(artifact="report", site_id="S1")

    with export_caplog.at_level(logging.ERROR, logger=LOGGER_NAME):
        ok = check_row_width(["a", "b"], 4, log)

    assert ok is False
    assert any("not same size as header: 2 vs header size of 4" in r.getMessage() for r in export_caplog.records)
    assert check_row_width(["a", "b"], 2, log) is True


def test_grades_missing_for_an_assignment_render_blank(bio101_host):
    export = _bio101_export(bio101_host)
    widened = SiteExport(
        site=export.site,
        users=export.users,
        assignments=export.assignments + (Assignment(id="x", name="Extra", points=1.0),),
        assessments=export.assessments,
        scores=export.scores,
        grades=export.grades,
        gradebook=export.gradebook,
    )

    report = build_site_report(widened, bio101_host)

    assert report.header[4] == "Extra [1]"
    assert report.rows[0][4:6] == ["", ""]
    assert all(len(r) == len(report.header) for r in report.rows)


def test_report_needs_a_gradebook(bio101_host):
    export = _bio101_export(bio101_host)
    bare = SiteExport(site=export.site, users=export.users, assignments=export.assignments)
    with pytest.raises(ValueError):
        build_site_report(bare, bio101_host)


def test_build_does_not_write_anything(bio101_host, tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    build_site_report(_bio101_export(bio101_host), bio101_host)
    assert list(tmp_path.iterdir()) == []


def test_write_site_report(bio101_host, tmp_path: Path):
    report = build_site_report(_bio101_export(bio101_host), bio101_host)

    path = write_site_report(report, tmp_path / "reports")

    assert path == tmp_path / "reports" / "BIO101.csv"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Student ID,Student Name,Quiz 1 [5],Comments,Total Points Earned [Points Possible],Course Grade"
    assert lines[1] == "aadams,Ann Adams,4.5,Nice work,,"
    assert lines[-1] == 'Mappings,"A=90,B=80,C=70,D=60,F=0",,,,'
