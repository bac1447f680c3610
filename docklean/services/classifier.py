"""Classify raw Docker CLI records into cleanable resource items."""

from typing import Any

from ..constants import (
    NONE_SENTINEL,
    STOPPED_CONTAINER_STATES,
    SYSTEM_NETWORKS,
    TOTAL_RECLAIMABLE_PATTERN,
)
from ..models.enums import ResourceKind
from ..models.resources import ResourceItem
from ..utils import parse_size


def _first(record: dict[str, Any], *keys: str) -> str | None:
    """Return the first non-empty value among alternative field names."""
    for key in keys:
        value = record.get(key)
        if value:
            return str(value)
    return None


def is_system_network(name: str) -> bool:
    """True for networks the Docker daemon creates itself."""
    return name in SYSTEM_NETWORKS


def classify_containers(records: list[dict[str, Any]]) -> list[ResourceItem]:
    """Stopped (exited or dead) containers."""
    items = []
    for record in records:
        state = str(record.get("State") or "").lower()
        if state not in STOPPED_CONTAINER_STATES:
            continue
        items.append(
            ResourceItem(
                id=_first(record, "ID", "ContainerID"),
                name=_first(record, "Names", "Name"),
                size=record.get("Size") or "",
                created_at=record.get("CreatedAt") or None,
                last_used=_first(record, "RunningFor", "Status"),
                raw=record,
            )
        )
    return items


def classify_images(
    records: list[dict[str, Any]], include_all_images: bool = False
) -> list[ResourceItem]:
    """Dangling images, or every image when include_all_images is set."""
    items = []
    for record in records:
        repository = record.get("Repository") or ""
        tag = record.get("Tag") or ""
        if not include_all_images and NONE_SENTINEL not in (repository, tag):
            continue
        items.append(
            ResourceItem(
                id=record.get("ID"),
                name=f"{repository}:{tag}",
                size=record.get("Size") or "",
                created_at=record.get("CreatedAt") or None,
                last_used=record.get("CreatedSince"),
                raw=record,
            )
        )
    return items


def classify_volumes(records: list[dict[str, Any]]) -> list[ResourceItem]:
    """Volumes are listed with dangling=true already; keep them all."""
    return [
        ResourceItem(
            id=_first(record, "Name", "Driver"),
            name=record.get("Name"),
            created_at=record.get("CreatedAt") or None,
            raw=record,
        )
        for record in records
    ]


def classify_networks(records: list[dict[str, Any]]) -> list[ResourceItem]:
    """Unused networks, minus the daemon's bridge/host/none."""
    return [
        ResourceItem(
            id=record.get("ID"),
            name=record.get("Name"),
            created_at=record.get("CreatedAt") or None,
            raw=record,
        )
        for record in records
        if not is_system_network(record.get("Name") or "")
    ]


def parse_cache_reclaimable(output: str) -> int:
    """Extract ``Total reclaimable: <size>`` from build cache preview output."""
    match = TOTAL_RECLAIMABLE_PATTERN.search(output or "")
    return parse_size(match.group(1)) if match else 0


def classify(
    kind: ResourceKind, records: list[dict[str, Any]], include_all_images: bool = False
) -> list[ResourceItem]:
    """Dispatch to the classifier for kinds that have individual items."""
    if kind == ResourceKind.CONTAINERS:
        return classify_containers(records)
    if kind == ResourceKind.IMAGES:
        return classify_images(records, include_all_images)
    if kind == ResourceKind.VOLUMES:
        return classify_volumes(records)
    if kind == ResourceKind.NETWORKS:
        return classify_networks(records)
    # Build cache has no addressable items
    return []
