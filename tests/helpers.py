"""Test data helpers shared across docklean tests."""

import json
from datetime import UTC, datetime, timedelta
from typing import Any

from docklean.models.enums import ResourceKind

# Fixed clock so age filters are deterministic
NOW = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


def days_ago(days: float) -> str:
    """ISO timestamp `days` before the fixed test clock."""
    return (NOW - timedelta(days=days)).isoformat()


def to_json_lines(records: list[dict[str, Any]]) -> str:
    """Render records the way `docker ... --format {{json .}}` prints them."""
    return "\n".join(json.dumps(record) for record in records)


PRUNE_LABELS = {
    ResourceKind.CONTAINERS: "Deleted Containers:",
    ResourceKind.IMAGES: "Deleted Images:",
    ResourceKind.VOLUMES: "Deleted Volumes:",
    ResourceKind.NETWORKS: "Deleted Networks:",
    ResourceKind.CACHE: "Deleted layers:",
}


def prune_response(kind: ResourceKind, count: int, reclaimed: str) -> str:
    """A prune response with a count line and a reclaimed space line."""
    return f"{PRUNE_LABELS[kind]} {count}\nTotal reclaimed space: {reclaimed}\n"
