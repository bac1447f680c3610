"""
Docker Scan Service

Inventory of unused Docker resources and reclaimable space estimates.
"""

from datetime import UTC, datetime
from typing import Any

import structlog

from ..constants import ALL_IMAGES_LABEL, SUMMARY_LABELS
from ..core.docker_cli import DockerCLI
from ..models.enums import ResourceKind
from ..models.params import ScanOptions
from ..models.resources import ResourceSummary, ScanResult
from ..utils import filter_until_timestamp, format_bytes, parse_size
from .classifier import classify, parse_cache_reclaimable
from .selection import filter_by_age, select_by_size


class ScanService:
    """Service for scanning Docker resources that are safe to clean."""

    def __init__(self, docker: DockerCLI):
        self.docker = docker
        self.logger = structlog.get_logger().bind(service="ScanService")

    async def scan(self, options: ScanOptions, now: datetime | None = None) -> ScanResult:
        """Scan the requested resource kinds.

        Kinds are processed one after another in the requested order.

        Args:
            options: Kinds to scan plus age and size selection policies
            now: Reference time for the age filter (defaults to the current time)

        Returns:
            One summary per requested kind and the total reclaimable estimate
        """
        now = now or datetime.now(UTC)
        self.logger.info(
            "Starting Docker scan",
            kinds=[kind.value for kind in options.kinds],
            older_than=str(options.older_than) if options.older_than else None,
            include_all_images=options.include_all_images,
            top=options.top,
            limit_bytes=options.limit_bytes,
        )

        summaries = []
        total_reclaimable_bytes = 0
        for kind in options.kinds:
            summary = await self._scan_kind(kind, options, now)
            summaries.append(summary)
            total_reclaimable_bytes += summary.reclaimable_bytes
            self.logger.debug(
                "Scanned resource kind",
                kind=kind.value,
                count=summary.count,
                reclaimable=format_bytes(summary.reclaimable_bytes),
            )

        if total_reclaimable_bytes == 0:
            total_reclaimable_bytes = await self._disk_usage_reclaimable()

        result = ScanResult(summaries=summaries, total_reclaimable_bytes=total_reclaimable_bytes)
        self.logger.info(
            "Docker scan complete",
            total_items=result.total_items,
            total_reclaimable=format_bytes(result.total_reclaimable_bytes),
        )
        return result

    async def _scan_kind(
        self, kind: ResourceKind, options: ScanOptions, now: datetime
    ) -> ResourceSummary:
        if kind == ResourceKind.CACHE:
            return await self._scan_cache(options, now)

        records = await self._fetch_records(kind)
        items = classify(kind, records, options.include_all_images)
        items = filter_by_age(items, options.older_than, now)
        # Volumes and networks report no size, so only these two are narrowed
        if kind in (ResourceKind.CONTAINERS, ResourceKind.IMAGES):
            items = select_by_size(items, options.top, options.limit_bytes)
            reclaimable_bytes = sum(parse_size(item.size) for item in items)
        else:
            reclaimable_bytes = 0

        return ResourceSummary(
            kind=kind,
            label=self._label(kind, options.include_all_images),
            items=items,
            reclaimable_bytes=reclaimable_bytes,
        )

    async def _fetch_records(self, kind: ResourceKind) -> list[dict[str, Any]]:
        if kind == ResourceKind.CONTAINERS:
            return await self.docker.list_containers()
        if kind == ResourceKind.IMAGES:
            return await self.docker.list_images()
        if kind == ResourceKind.VOLUMES:
            return await self.docker.list_volumes(dangling_only=True)
        return await self.docker.list_networks(dangling_only=True)

    async def _scan_cache(self, options: ScanOptions, now: datetime) -> ResourceSummary:
        filter_until = filter_until_timestamp(options.older_than, now)
        output = await self.docker.preview_cache_prune(filter_until)
        return ResourceSummary(
            kind=ResourceKind.CACHE,
            label=self._label(ResourceKind.CACHE, options.include_all_images),
            items=[],
            reclaimable_bytes=parse_cache_reclaimable(output),
        )

    async def _disk_usage_reclaimable(self) -> int:
        """Fallback estimate from ``docker system df`` when no item reported a size."""
        rows = await self.docker.system_df()
        for row in rows:
            reclaimable = row.get("Reclaimable")
            if reclaimable:
                self.logger.debug("Using disk usage reclaimable estimate", reclaimable=reclaimable)
                return parse_size(reclaimable)
        return 0

    def _label(self, kind: ResourceKind, include_all_images: bool) -> str:
        if kind == ResourceKind.IMAGES and include_all_images:
            return ALL_IMAGES_LABEL
        return SUMMARY_LABELS[kind]


def summarize_scan(result: ScanResult) -> str:
    """One-line estimate for human-facing output."""
    return f"Estimated reclaimable: {format_bytes(result.total_reclaimable_bytes)}"
