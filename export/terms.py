# export/terms.py
from __future__ import annotations

from typing import List, Optional, Sequence

from export.providers import TermProvider
from logging_setup import get_logger
from models import AcademicTerm


def resolve_terms(configured: Optional[Sequence[AcademicTerm]], provider: TermProvider) -> List[AcademicTerm]:
    """
    Decide which terms to export.

    - A non-empty configured list wins and is used verbatim (duplicates kept).
    - Otherwise ask the provider for the current terms, de-duplicated in first-seen order.
    - No current terms -> [] so callers can always iterate.
    """
    log = get_logger(artifact="terms")

    if configured:
        terms = list(configured)
        log.info("using configured terms", extra={"terms": terms})
        return terms

    current = provider.current_terms() or []
    terms = list(dict.fromkeys(current))
    log.debug("current terms", extra={"terms": terms, "reported": len(terms)})
    if not terms:
        log.warning("no current academic terms; nothing to export")
    return terms
