from __future__ import annotations

import calendar
import logging
import re
from datetime import date, datetime

from sqlalchemy.orm import Session

from hospital_admin.app.core.config import settings
from hospital_admin.app.models.inventory import StockItem
from hospital_admin.app.services.aging import AgingBucketSpec, classify, days_between
from hospital_admin.app.services.cache import TTLCache

logger = logging.getLogger(__name__)

EXPIRY_BUCKETS: tuple[AgingBucketSpec, ...] = (
    AgingBucketSpec("expired", "Expired", 0),
    AgingBucketSpec("within_30", "Within 30 Days", 30),
    AgingBucketSpec("within_60", "Within 60 Days", 60),
    AgingBucketSpec("within_90", "Within 90 Days", 90),
)

# Filter periods offered by the dashboard: "expired" or a cumulative day limit.
PERIODS = ("expired", "30", "60", "90")

_MONTH_YEAR = re.compile(r"^(\d{1,2})[/-](\d{2}|\d{4})$")
_YEAR_MONTH = re.compile(r"^(\d{4})-(\d{1,2})$")
_DAY_MONTH_YEAR = re.compile(r"^(\d{1,2})[/-](\d{1,2})[/-](\d{4})$")

stock_cache = TTLCache(
    ttl_seconds=settings.STOCK_CACHE_TTL_SECONDS,
    max_entries=settings.STOCK_CACHE_MAX_ENTRIES,
)
STOCK_CACHE_KEY = "stock_items"


def _end_of_month(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def parse_expiry(value: str | None) -> date | None:
    """Parse a stored expiry string; None when blank, "N/A" or unreadable.

    Month-only expiries (``2027-03``, ``03/2027``, ``03/27``) mean the last
    day of that month.
    """
    if not value:
        return None
    text = value.strip()
    if not text or text.upper() == "N/A":
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        m = _YEAR_MONTH.match(text)
        if m:
            return _end_of_month(int(m.group(1)), int(m.group(2)))
        m = _MONTH_YEAR.match(text)
        if m:
            year = int(m.group(2))
            if year < 100:
                year += 2000
            return _end_of_month(year, int(m.group(1)))
        m = _DAY_MONTH_YEAR.match(text)
        if m:
            return date(int(m.group(3)), int(m.group(2)), int(m.group(1)))
        return datetime.fromisoformat(text).date()
    except ValueError:
        logger.debug("Unreadable expiry date %r", value)
        return None


def _load_stock_rows(db: Session) -> list[dict]:
    items = db.query(StockItem).order_by(StockItem.item_id.asc()).all()
    return [
        {
            "item_id": i.item_id,
            "name": i.name,
            "batch_no": i.batch_no,
            "category": i.category,
            "expiry_date": i.expiry_date,
            "current_stock": i.current_stock,
        }
        for i in items
    ]


def list_stock_rows(db: Session) -> list[dict]:
    """Stock items as plain rows, served from ``stock_cache`` when fresh."""
    return stock_cache.get_or_load(STOCK_CACHE_KEY, lambda: _load_stock_rows(db))


def invalidate_stock_cache() -> None:
    stock_cache.invalidate(STOCK_CACHE_KEY)


def _in_period(days_left: int, period: str) -> bool:
    if period == "expired":
        return days_left <= 0
    return 0 < days_left <= int(period)


def get_expiry_alerts(db: Session, as_of_date: date, period: str | None = None) -> dict:
    """Stock batches that have expired or expire within 90 days."""
    if period is not None and period not in PERIODS:
        raise ValueError(f"Unknown expiry period {period!r}")

    counts = {spec.key: 0 for spec in EXPIRY_BUCKETS}
    alerts = []
    for row in list_stock_rows(db):
        expiry = parse_expiry(row["expiry_date"])
        if expiry is None:
            continue
        days_left = days_between(as_of_date, expiry)
        spec = classify(days_left, EXPIRY_BUCKETS)
        if spec is None:
            continue
        counts[spec.key] += 1
        if period is None or _in_period(days_left, period):
            alerts.append({
                **row,
                "expiry_date": expiry.isoformat(),
                "days_left": days_left,
                "bucket": spec.key,
            })

    alerts.sort(key=lambda a: (a["expiry_date"], a["name"]))
    return {
        "as_of_date": str(as_of_date),
        "period": period,
        "counts": counts,
        "total_alerts": sum(counts.values()),
        "items": alerts,
    }
