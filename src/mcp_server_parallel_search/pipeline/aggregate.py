"""Classify fetch outcomes and build the final report."""

import logging
from collections.abc import Sequence

from ..exceptions import AllFetchesFailedError
from ..models import FetchFailure, FetchOutcome, FetchReport, FetchSuccess
from .normalize import MAX_CONTENT_CHARS, normalize_body

logger = logging.getLogger(__name__)


def aggregate(outcomes: Sequence[FetchOutcome], max_chars: int = MAX_CONTENT_CHARS) -> FetchReport:
    """Turn per-URL outcomes into a :class:`FetchReport`.

    Successful bodies are normalized in outcome order. Failures are only
    logged. An empty outcome list gives an unsuccessful, empty report.

    Raises:
        AllFetchesFailedError: *outcomes* is non-empty and none succeeded.
    """
    if not outcomes:
        logger.warning("No URLs to fetch; returning empty report")
        return FetchReport.empty()

    successes = [o for o in outcomes if isinstance(o, FetchSuccess)]
    failures = [o for o in outcomes if isinstance(o, FetchFailure)]

    pages = [normalize_body(s.raw_body, max_chars) for s in successes]

    logger.info(f"Fetched {len(successes)} URL(s) successfully")
    if failures:
        logger.error(f"{len(failures)} request(s) failed. Reasons: {[f.reason for f in failures]}")

    if not pages:
        raise AllFetchesFailedError([f.reason for f in failures])

    return FetchReport(success=True, pages=pages)
