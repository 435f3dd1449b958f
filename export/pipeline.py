# export/pipeline.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from config import SiteCommit
from export.aggregate import aggregate_site
from export.providers import EnrollmentDirectory, GradebookProvider, SiteDirectory, TermProvider
from export.report import build_site_report, write_site_report
from export.sink import RecordSink
from export.sites import select_sites
from export.terms import resolve_terms
from logging_setup import get_logger
from models import AcademicTerm, Failed, Processed, SiteReport, SiteResult, Skipped


@dataclass
class RunSummary:
    terms: List[AcademicTerm] = field(default_factory=list)
    results: List[SiteResult] = field(default_factory=list)
    reports: List[SiteReport] = field(default_factory=list)
    report_paths: List[Path] = field(default_factory=list)
    assessments: int = 0
    scores: int = 0

    @property
    def processed(self) -> int:
        return sum(1 for r in self.results if isinstance(r, Processed))

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if isinstance(r, Failed))

    @property
    def skipped(self) -> Counter:
        return Counter(r.reason.value for r in self.results if isinstance(r, Skipped))


class GradebookExport:
    """
    One full export run: terms -> sites -> per-site aggregation -> two files.

    Collaborators are fixed at construction. Site problems are contained to
    the site; only export.errors.WriteAborted escapes run().
    """

    def __init__(
        self,
        *,
        terms: TermProvider,
        sites: SiteDirectory,
        enrollment: EnrollmentDirectory,
        gradebooks: GradebookProvider,
        output_dir: Path,
        configured_terms: Optional[Sequence[AcademicTerm]] = None,
        site_commit: SiteCommit = SiteCommit.PARTIAL,
        build_reports: bool = False,
        report_dir: Optional[Path] = None,
    ) -> None:
        self._terms = terms
        self._sites = sites
        self._enrollment = enrollment
        self._gradebooks = gradebooks
        self._output_dir = Path(output_dir)
        self._configured_terms = list(configured_terms or [])
        self._site_commit = SiteCommit(site_commit)
        self._report_dir = Path(report_dir) if report_dir else None
        self._build_reports = build_reports or self._report_dir is not None
        self.log = get_logger(artifact="runner")

    def run(self) -> RunSummary:
        self.log.info("gradebook export started")
        sink = RecordSink(self._output_dir)
        sink.remove_stale()

        summary = RunSummary()
        summary.terms = resolve_terms(self._configured_terms, self._terms)

        for term in summary.terms:
            for site in select_sites(term, self._sites):
                result = aggregate_site(site, self._enrollment, self._gradebooks)
                summary.results.append(result)
                self._collect(result, sink, summary)

        sink.flush()
        summary.assessments = len(sink.assessments)
        summary.scores = len(sink.scores)
        self.log.info(
            "gradebook export ended",
            extra={
                "terms": len(summary.terms),
                "processed": summary.processed,
                "skipped": dict(summary.skipped),
                "failed": summary.failed,
                "assessments": summary.assessments,
                "scores": summary.scores,
            },
        )
        return summary

    def _collect(self, result: SiteResult, sink: RecordSink, summary: RunSummary) -> None:
        if isinstance(result, Processed):
            sink.extend(result.export.assessments, result.export.scores)
            if self._build_reports:
                self._report(result, summary)
        elif isinstance(result, Failed):
            if self._site_commit is SiteCommit.PARTIAL:
                sink.extend(result.partial.assessments, result.partial.scores)
            self.log.warning(
                "site abandoned",
                extra={
                    "failed_site": result.site.id,
                    "commit": self._site_commit.value,
                    "kept_assessments": len(result.partial.assessments) if self._site_commit is SiteCommit.PARTIAL else 0,
                },
            )

    def _report(self, result: Processed, summary: RunSummary) -> None:
        log = get_logger(artifact="report", site_id=result.site.id)
        try:
            report = build_site_report(result.export, self._gradebooks)
            summary.reports.append(report)
            if self._report_dir is not None:
                summary.report_paths.append(write_site_report(report, self._report_dir))
        except Exception as e:
            # report failures stay with the site
            log.error("could not build site report", exc_info=True, extra={"error": str(e)})
