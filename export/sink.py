# export/sink.py
from __future__ import annotations

import csv
import io
from dataclasses import astuple
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple, Union

from export.errors import SerializationError, WriterIOError
from logging_setup import get_logger
from models import AssessmentRecord, ScoreRecord
from utils.fs import atomic_write, remove_file

ASSESSMENTS_FILE = "assessments.txt"
SCORES_FILE = "scores.txt"

_REQUIRED = {
    ASSESSMENTS_FILE: ("external_assessment_id", "external_section_id", "name"),
    SCORES_FILE: ("external_assessment_id", "external_section_id", "student_external_id"),
}
_FLAGS = {
    ASSESSMENTS_FILE: ("is_counted", "is_aggregate", "reserved_flag"),
    SCORES_FILE: (),
}

Record = Union[AssessmentRecord, ScoreRecord]


def _validate(record: Record, artifact: str, index: int) -> None:
    for name in _REQUIRED[artifact]:
        value = getattr(record, name)
        if not isinstance(value, str) or not value:
            raise SerializationError(f"required field {name!r} is empty", artifact=artifact, row_index=index)
    for name in _FLAGS[artifact]:
        value = getattr(record, name)
        if isinstance(value, bool) or value not in (0, 1):
            raise SerializationError(f"field {name!r} must be 0 or 1, got {value!r}", artifact=artifact, row_index=index)


def render_csv(header: Sequence[str], records: Iterable[Record], artifact: str) -> str:
    """
    Header + one comma-delimited row per record. Validates every row before
    anything touches disk. None renders as an empty cell.
    """
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header)
    for i, record in enumerate(records, start=1):
        _validate(record, artifact, i)
        row = astuple(record)
        if len(row) != len(header):
            raise SerializationError(
                f"row has {len(row)} columns, header has {len(header)}", artifact=artifact, row_index=i
            )
        writer.writerow(row)
    return buf.getvalue()


class RecordSink:
    """
    Run-wide accumulator for assessments.txt and scores.txt.

    Sequences are append-only and only ever read back as tuples. Call
    remove_stale() before aggregation and flush() once at the end.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)
        self._assessments: List[AssessmentRecord] = []
        self._scores: List[ScoreRecord] = []
        self.log = get_logger(artifact="sink")

    @property
    def assessments_path(self) -> Path:
        return self.output_dir / ASSESSMENTS_FILE

    @property
    def scores_path(self) -> Path:
        return self.output_dir / SCORES_FILE

    @property
    def assessments(self) -> Tuple[AssessmentRecord, ...]:
        return tuple(self._assessments)

    @property
    def scores(self) -> Tuple[ScoreRecord, ...]:
        return tuple(self._scores)

    def extend(self, assessments: Iterable[AssessmentRecord], scores: Iterable[ScoreRecord]) -> None:
        self._assessments.extend(assessments)
        self._scores.extend(scores)

    def remove_stale(self) -> None:
        """Delete previous output so a missing file means the run did not finish."""
        for path in (self.assessments_path, self.scores_path):
            try:
                if remove_file(path):
                    self.log.debug("removed stale output: %s", path)
            except OSError as e:
                raise WriterIOError(f"could not remove stale output {path}: {e}") from e

    def flush(self) -> Tuple[Path, Path]:
        """
        Serialize both sequences and write them, assessments first.

        SerializationError is raised before either file is written. A
        WriterIOError on scores.txt leaves assessments.txt in place; the
        run must still be treated as failed.
        """
        assessments_text = render_csv(AssessmentRecord.HEADER, self._assessments, ASSESSMENTS_FILE)
        scores_text = render_csv(ScoreRecord.HEADER, self._scores, SCORES_FILE)

        for path, text in ((self.assessments_path, assessments_text), (self.scores_path, scores_text)):
            try:
                atomic_write(path, text)
            except OSError as e:
                raise WriterIOError(f"could not write {path}: {e}") from e
            self.log.info("wrote %s", path)

        self.log.info(
            "export written",
            extra={"assessments": len(self._assessments), "scores": len(self._scores)},
        )
        return self.assessments_path, self.scores_path
