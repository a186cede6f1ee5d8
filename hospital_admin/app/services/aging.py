from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


@dataclass(frozen=True)
class AgingBucketSpec:
    """One day-range of an aging table.

    The lower bound is the previous bucket's ``upper_days`` (exclusive);
    ``upper_days=None`` marks the open-ended last range.
    """

    key: str
    label: str
    upper_days: int | None


PAYABLE_BUCKETS: tuple[AgingBucketSpec, ...] = (
    AgingBucketSpec("current", "Current", 0),
    AgingBucketSpec("days_1_30", "1-30 Days", 30),
    AgingBucketSpec("days_31_60", "31-60 Days", 60),
    AgingBucketSpec("days_61_90", "61-90 Days", 90),
    AgingBucketSpec("days_91_120", "91-120 Days", 120),
    AgingBucketSpec("days_120_plus", "120+ Days", None),
)


@dataclass(frozen=True)
class Obligation:
    """An amount owed to a supplier, from a purchase order or a payment record."""

    id: str
    counterparty_name: str
    total_amount: Decimal
    paid_amount: Decimal = ZERO
    due_date: date | None = None
    settled: bool = False

    @property
    def pending_amount(self) -> Decimal:
        return max(ZERO, self.total_amount - self.paid_amount)


@dataclass
class BucketTotal:
    key: str
    label: str
    amount: Decimal = ZERO
    count: int = 0


@dataclass
class AgingSummary:
    buckets: list[BucketTotal]
    total_pending: Decimal = ZERO
    total_overdue: Decimal = ZERO
    overdue_count: int = 0
    distinct_overdue_counterparties: int = 0
    overdue_counterparties: set[str] = field(default_factory=set, repr=False)

    def bucket(self, key: str) -> BucketTotal:
        for b in self.buckets:
            if b.key == key:
                return b
        raise KeyError(key)

    @property
    def overdue_percentage(self) -> Decimal:
        if self.total_pending <= ZERO:
            return ZERO
        return (self.total_overdue / self.total_pending * 100).quantize(Decimal("0.1"))


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def days_between(start: date | datetime, end: date | datetime) -> int:
    """Whole calendar days from *start* to *end* (positive when *end* is later).

    Datetimes are truncated to their calendar date first, so a DST
    transition between the two never changes the result.
    """
    return (_as_date(end) - _as_date(start)).days


def classify(
    days: int, buckets: Sequence[AgingBucketSpec] = PAYABLE_BUCKETS
) -> AgingBucketSpec | None:
    """Return the first bucket whose upper bound admits *days*."""
    for spec in buckets:
        if spec.upper_days is None or days <= spec.upper_days:
            return spec
    return None


def compute_aging(
    obligations: Iterable[Obligation],
    reference_date: date | datetime,
    buckets: Sequence[AgingBucketSpec] = PAYABLE_BUCKETS,
) -> AgingSummary:
    """Bucket every unsettled obligation's pending amount by days overdue.

    The first bucket of *buckets* is the not-yet-due bucket; every other
    bucket counts towards the overdue totals. An obligation without a due
    date is treated as not yet due.
    """
    if not buckets:
        raise ValueError("At least one aging bucket is required")

    summary = AgingSummary(buckets=[BucketTotal(b.key, b.label) for b in buckets])
    current_key = buckets[0].key
    totals = {b.key: b for b in summary.buckets}

    for ob in obligations:
        if ob.settled:
            continue
        pending = ob.pending_amount
        if pending <= ZERO:
            continue

        if ob.due_date is None:
            spec = buckets[0]
        else:
            spec = classify(days_between(ob.due_date, reference_date), buckets)
            if spec is None:
                # Closed bucket set and the obligation is past its last bound.
                continue

        bkt = totals[spec.key]
        bkt.amount += pending
        bkt.count += 1

        if spec.key != current_key:
            summary.total_overdue += pending
            summary.overdue_count += 1
            summary.overdue_counterparties.add(ob.counterparty_name)

    summary.total_pending = sum((b.amount for b in summary.buckets), ZERO)
    summary.distinct_overdue_counterparties = len(summary.overdue_counterparties)

    logger.debug(
        "Aging as of %s: pending=%s overdue=%s (%d obligations overdue)",
        _as_date(reference_date),
        summary.total_pending,
        summary.total_overdue,
        summary.overdue_count,
    )
    return summary
