"""Utility functions for docklean.

Size and time conversions shared by the scan and cleanup services:
- Docker size strings ("1.5 GB", "980.2MB (2%)") to integer bytes and back
- Strict parsing of user-supplied size limits
- Docker timestamps and --older-than durations
"""

import math
import re
from datetime import UTC, datetime, timedelta

from .core.exceptions import InvalidArgumentError

# Decimal (SI) multipliers, matching what the Docker CLI prints
SIZE_MULTIPLIERS = {
    "b": 1,
    "kb": 1000,
    "mb": 1000**2,
    "gb": 1000**3,
    "tb": 1000**4,
}
SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

SIZE_PATTERN = re.compile(r"([0-9.]+)\s*(B|kB|KB|MB|GB|TB)", re.IGNORECASE)
SIZE_LIMIT_PATTERN = re.compile(r"^(-?[0-9]*\.?[0-9]+)\s*([A-Za-z]*)$")
DURATION_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*(m|h|d|w)$", re.IGNORECASE)

DURATION_UNITS = {
    "m": timedelta(minutes=1),
    "h": timedelta(hours=1),
    "d": timedelta(days=1),
    "w": timedelta(weeks=1),
}

# "2024-01-15 10:30:00 +0000 UTC" as printed by `docker ps --format`
DOCKER_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %z"
DOCKER_TIMESTAMP_FRACTION_FORMAT = "%Y-%m-%d %H:%M:%S.%f %z"


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def parse_size(size_str: str | None) -> int:
    """Convert a Docker size string to bytes.

    Best effort: anything that does not look like ``<number> <unit>`` is
    worth 0 bytes rather than an error.

    Examples:
        >>> parse_size("1.5 GB")
        1500000000
        >>> parse_size("980.2MB (2%)")
        980200000
        >>> parse_size("garbage")
        0
    """
    if not size_str:
        return 0

    match = SIZE_PATTERN.search(size_str.strip())
    if not match:
        return 0

    try:
        value = float(match.group(1))
    except ValueError:
        return 0

    multiplier = SIZE_MULTIPLIERS.get(match.group(2).lower(), 1)
    return _round_half_up(value * multiplier)


def format_bytes(size_bytes: int | float) -> str:
    """Format bytes into a human-readable string using decimal units.

    Examples:
        >>> format_bytes(0)
        '0 B'
        >>> format_bytes(1500)
        '1.5 KB'
        >>> format_bytes(100 * 1000 * 1000)
        '100 MB'
    """
    if size_bytes <= 0:
        return "0 B"

    value = float(size_bytes)
    unit_index = 0
    while value >= 1000 and unit_index < len(SIZE_UNITS) - 1:
        value /= 1000
        unit_index += 1

    if unit_index > 0 and value < 10:
        return f"{value:.1f} {SIZE_UNITS[unit_index]}"
    return f"{_round_half_up(value)} {SIZE_UNITS[unit_index]}"


def parse_size_limit(limit_str: str | int | None) -> int:
    """Parse a user-supplied size limit such as ``"5GB"`` or ``"1048576"``.

    Unlike :func:`parse_size` this is strict, since it validates user input.

    Raises:
        InvalidArgumentError: empty, non-numeric, negative or zero limits
    """
    if isinstance(limit_str, bool):
        raise InvalidArgumentError(f"Invalid size limit: {limit_str!r}")
    if isinstance(limit_str, int):
        if limit_str <= 0:
            raise InvalidArgumentError("Size limit must be greater than zero")
        return limit_str

    text = (limit_str or "").strip()
    if not text:
        raise InvalidArgumentError("Size limit cannot be empty")

    match = SIZE_LIMIT_PATTERN.match(text)
    if not match:
        raise InvalidArgumentError(
            f"Invalid size limit: '{text}'. Use a number with an optional unit like 500MB or 2GB."
        )

    value = float(match.group(1))
    unit = match.group(2).lower() or "b"
    if unit not in SIZE_MULTIPLIERS:
        raise InvalidArgumentError(
            f"Invalid size unit '{match.group(2)}'. Use one of: {', '.join(SIZE_UNITS)}."
        )
    if value < 0:
        raise InvalidArgumentError("Size limit cannot be negative")
    if value == 0:
        raise InvalidArgumentError("Size limit must be greater than zero")

    return _round_half_up(value * SIZE_MULTIPLIERS[unit])


def parse_duration(duration_str: str | None) -> timedelta:
    """Parse an --older-than duration made of a number and one of m/h/d/w.

    Raises:
        InvalidArgumentError: empty value, unsupported unit (seconds included)
    """
    text = (duration_str or "").strip()
    match = DURATION_PATTERN.match(text)
    if not match:
        raise InvalidArgumentError(
            "Invalid --older-than value. Use m/h/d/w like 7d or 12h."
        )

    duration = DURATION_UNITS[match.group(2).lower()] * float(match.group(1))
    if duration <= timedelta(0):
        raise InvalidArgumentError("--older-than must be greater than zero")
    return duration


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse a Docker ``CreatedAt`` value or an ISO 8601 string.

    Naive timestamps are treated as UTC. Returns None when unparseable.
    """
    if not value:
        return None

    text = value.strip()
    parsed: datetime | None = None

    # Docker appends the zone name after the numeric offset
    parts = text.split(" ")
    if len(parts) == 4 and parts[2][:1] in "+-":
        clock, fmt = parts[1], DOCKER_TIMESTAMP_FORMAT
        if "." in clock:
            # Nanosecond precision; %f takes at most 6 digits
            whole, fraction = clock.split(".", 1)
            clock, fmt = f"{whole}.{fraction[:6]}", DOCKER_TIMESTAMP_FRACTION_FORMAT
        try:
            parsed = datetime.strptime(f"{parts[0]} {clock} {parts[2]}", fmt)
        except ValueError:
            parsed = None

    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def filter_until_timestamp(
    older_than: timedelta | None, now: datetime | None = None
) -> str | None:
    """Build the ISO cutoff passed to ``--filter until=...``."""
    if not older_than:
        return None
    now = now or datetime.now(UTC)
    cutoff = now - older_than
    return cutoff.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + (
        f"{cutoff.microsecond // 1000:03d}Z"
    )
