# config.py
from __future__ import annotations

import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional

from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parent


class SiteCommit(str, Enum):
    # keep whatever a failed site emitted before the error (historic behaviour)
    PARTIAL = "partial"
    # a failed site contributes nothing
    BUFFERED = "buffered"


def load_env_if_opted_in() -> None:
    """
    Only load .env files when explicitly opted in.
    - GRADEBOOK_DOTENV_LOAD=1 enables
    - GRADEBOOK_DOTENV_DISABLE=1 always disables
    """
    if os.getenv("GRADEBOOK_DOTENV_DISABLE") == "1":
        return
    if os.getenv("GRADEBOOK_DOTENV_LOAD") != "1":
        return
    # repo defaults, then local overrides
    load_dotenv(str(REPO_ROOT / ".env"))
    load_dotenv(str(REPO_ROOT / ".env.local"), override=True)


def split_terms(raw: Optional[str]) -> List[str]:
    """Comma-separated term codes; blanks dropped, order and duplicates kept."""
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


@dataclass(frozen=True)
class ExportConfig:
    output_dir: Path = field(default_factory=lambda: Path(tempfile.gettempdir()))
    terms: List[str] = field(default_factory=list)
    site_commit: SiteCommit = SiteCommit.PARTIAL
    report_dir: Optional[Path] = None
    host_url: Optional[str] = None
    host_token: Optional[str] = None
    http_timeout: Optional[str] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "ExportConfig":
        if env is None:
            load_env_if_opted_in()
            env = os.environ
        output = env.get("GRADEBOOK_EXPORT_PATH")
        report = env.get("GRADEBOOK_EXPORT_REPORT_PATH")
        return cls(
            output_dir=Path(output) if output else Path(tempfile.gettempdir()),
            terms=split_terms(env.get("GRADEBOOK_EXPORT_TERMS")),
            site_commit=SiteCommit((env.get("GRADEBOOK_EXPORT_SITE_COMMIT") or "partial").strip().lower()),
            report_dir=Path(report) if report else None,
            host_url=env.get("GRADEBOOK_HOST_URL") or None,
            host_token=env.get("GRADEBOOK_HOST_TOKEN") or None,
            http_timeout=env.get("GRADEBOOK_HTTP_TIMEOUT") or None,
        )
