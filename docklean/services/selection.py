"""Age and size based narrowing of scanned items."""

from datetime import UTC, datetime, timedelta

from ..models.resources import ResourceItem
from ..utils import parse_size, parse_timestamp


def filter_by_age(
    items: list[ResourceItem],
    older_than: timedelta | None,
    now: datetime | None = None,
) -> list[ResourceItem]:
    """Keep items created at or after ``now - older_than``.

    Items without a parseable creation time are dropped whenever a
    threshold is given, since their age can't be established.
    """
    if not older_than:
        return items

    cutoff = (now or datetime.now(UTC)) - older_than
    kept = []
    for item in items:
        created = parse_timestamp(item.created_at)
        if created is not None and created >= cutoff:
            kept.append(item)
    return kept


def sort_by_size(items: list[ResourceItem]) -> list[ResourceItem]:
    """Largest first; equal sizes keep their input order."""
    return sorted(items, key=lambda item: parse_size(item.size), reverse=True)


def select_top(items: list[ResourceItem], top: int) -> list[ResourceItem]:
    """First ``top`` items of an already size-sorted list."""
    return items[:top]


def select_until_limit(items: list[ResourceItem], limit_bytes: int) -> list[ResourceItem]:
    """Take items until their combined size reaches the limit.

    The item that crosses the limit is included.
    """
    selected = []
    total = 0
    for item in items:
        selected.append(item)
        total += parse_size(item.size)
        if total >= limit_bytes:
            break
    return selected


def select_by_size(
    items: list[ResourceItem],
    top: int | None = None,
    limit_bytes: int | None = None,
) -> list[ResourceItem]:
    """Apply the top-N or cumulative limit policy; at most one may be set."""
    if top is None and limit_bytes is None:
        return items

    ordered = sort_by_size(items)
    if top is not None:
        return select_top(ordered, top)
    return select_until_limit(ordered, limit_bytes)
