# export/errors.py
from __future__ import annotations


class GradebookNotFound(LookupError):
    """The host has no gradebook for the requested site."""

    def __init__(self, site_id: str) -> None:
        super().__init__(f"no gradebook for site {site_id}")
        self.site_id = site_id


class HostConfigError(ValueError):
    """Host URL or token missing."""


class WriteAborted(RuntimeError):
    """Fatal to the whole run: output artifacts could not be produced."""


class WriterIOError(WriteAborted):
    """An artifact could not be removed, opened or written."""


class SerializationError(WriteAborted):
    """A record could not be rendered as a CSV row."""

    def __init__(self, message: str, *, artifact: str, row_index: int) -> None:
        super().__init__(f"{artifact} row {row_index}: {message}")
        self.artifact = artifact
        self.row_index = row_index
