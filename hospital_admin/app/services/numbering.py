from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.orm import InstrumentedAttribute, Session

logger = logging.getLogger(__name__)

PO_PREFIX = "PO"
GRN_PREFIX = "GRN"
SUFFIX_WIDTH = 3


def document_prefix(prefix: str, on_date: date) -> str:
    """Return the per-day prefix, e.g. ``PO20261019``."""
    return f"{prefix}{on_date.strftime('%Y%m%d')}"


def next_document_number(
    db: Session,
    column: InstrumentedAttribute[str | None],
    prefix: str,
    on_date: date,
) -> str:
    """Return the next number for *prefix* on *on_date*, like PO20261019001.

    Looks up the highest numeric suffix already stored under today's prefix
    and increments it. There is no lock: two concurrent callers can compute
    the same number, and the column's unique constraint rejects the second
    insert.
    """
    day_prefix = document_prefix(prefix, on_date)
    existing = db.query(column).filter(column.like(f"{day_prefix}%")).all()

    highest = 0
    for (value,) in existing:
        suffix = value[len(day_prefix):]
        if suffix.isdigit():
            highest = max(highest, int(suffix))

    number = f"{day_prefix}{highest + 1:0{SUFFIX_WIDTH}d}"
    logger.debug("Allocated document number %s", number)
    return number
