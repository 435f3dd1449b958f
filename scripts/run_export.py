#!/usr/bin/env python3
"""
Gradebook export runner. Meant to be triggered by a scheduler (cron, systemd timer).

Usage:
  python scripts/run_export.py -v
  python scripts/run_export.py --term FA24 --term SP25 --output-dir /srv/export -v
  python scripts/run_export.py --report-dir /srv/export/reports --site-commit buffered
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

# --- ensure repo root on sys.path ---
THIS_FILE = Path(__file__).resolve()
REPO_ROOT = THIS_FILE.parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import ExportConfig, SiteCommit
from export.errors import HostConfigError, WriteAborted
from export.host import HostDirectory
from export.pipeline import GradebookExport
from logging_setup import setup_logging, get_logger
from utils.api import HostAPI, parse_timeout


def build_directory(config: ExportConfig) -> HostDirectory:
    if not config.host_url or not config.host_token:
        raise HostConfigError("Set GRADEBOOK_HOST_URL and GRADEBOOK_HOST_TOKEN in the environment.")
    api = HostAPI(config.host_url, config.host_token, timeout=parse_timeout(config.http_timeout))
    return HostDirectory(api)


def main(argv: Optional[List[str]] = None) -> int:
    p = argparse.ArgumentParser(description="Export gradebook assessments and scores for the advising platform")
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for assessments.txt and scores.txt")
    p.add_argument("--term", dest="terms", action="append", default=None,
                   help="Term code to export (repeatable). Default: current terms")
    p.add_argument("--site-commit", choices=[c.value for c in SiteCommit], default=None,
                   help="What a failed site contributes: 'partial' (records built before the error) or 'buffered' (nothing)")
    p.add_argument("--report-dir", type=Path, default=None, help="Also write a wide per-site report into this directory")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase verbosity (-v, -vv)")
    args = p.parse_args(argv)

    # 0-1=INFO, 2+=DEBUG
    setup_logging(verbosity=min(args.verbose, 2))
    log = get_logger(artifact="runner")

    # HostConfigError and bad enum values are both ValueErrors
    try:
        config = ExportConfig.from_env()
        directory = build_directory(config)
    except ValueError as e:
        log.error("invalid configuration: %s", e)
        return 2

    output_dir = args.output_dir or config.output_dir
    terms = args.terms if args.terms else config.terms
    site_commit = SiteCommit(args.site_commit) if args.site_commit else config.site_commit
    report_dir = args.report_dir or config.report_dir

    job = GradebookExport(
        terms=directory,
        sites=directory,
        enrollment=directory,
        gradebooks=directory,
        output_dir=output_dir,
        configured_terms=terms,
        site_commit=site_commit,
        report_dir=report_dir,
    )

    try:
        summary = job.run()
    except WriteAborted as e:
        log.error("export aborted: %s", e, exc_info=True)
        return 1

    log.info(
        "export complete: %d assessments, %d scores (%d sites processed, %d failed)",
        summary.assessments, summary.scores, summary.processed, summary.failed,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
