"""
Docker Cleanup Service

Removal of scanned Docker resources by bulk prune or by identifier.
"""

import structlog

from ..constants import DELETED_COUNT_PATTERN, TOTAL_RECLAIMED_PATTERN
from ..core.docker_cli import DockerCLI
from ..models.enums import ResourceKind
from ..models.params import CleanOptions
from ..models.resources import CleanResult
from ..utils import filter_until_timestamp, format_bytes, parse_size


def parse_pruned_count(output: str) -> int:
    """Sum every ``Deleted <Kind>: N`` line; 0 when none are present."""
    return sum(int(match) for match in DELETED_COUNT_PATTERN.findall(output or ""))


def parse_reclaimed_bytes(output: str) -> int:
    """Extract ``Total reclaimed space: <size>``; 0 when absent."""
    match = TOTAL_RECLAIMED_PATTERN.search(output or "")
    return parse_size(match.group(1)) if match else 0


class CleanupService:
    """Service for Docker cleanup operations."""

    def __init__(self, docker: DockerCLI):
        self.docker = docker
        self.logger = structlog.get_logger().bind(service="CleanupService")

    async def clean(self, options: CleanOptions) -> CleanResult:
        """Remove resources of each requested kind.

        Without selected identifiers every kind is pruned in bulk. With them
        (size selection was active during the scan) each kind except cache is
        removed by identifier. A failure in one kind is recorded and the
        remaining kinds still run.

        Args:
            options: Kinds, filters, scan-time counts and optional identifiers

        Returns:
            Removed counts and failures per kind plus total reclaimed bytes
        """
        result = CleanResult()
        if options.dry_run:
            self.logger.info("Dry run, skipping cleanup", kinds=[k.value for k in options.kinds])
            return result

        filter_until = filter_until_timestamp(options.older_than)
        mode = "prune" if options.use_bulk_prune else "remove_by_id"
        self.logger.info(
            "Starting Docker cleanup",
            kinds=[kind.value for kind in options.kinds],
            mode=mode,
            filter_until=filter_until,
        )

        for kind in options.kinds:
            try:
                if options.use_bulk_prune or kind == ResourceKind.CACHE:
                    removed, reclaimed = await self._prune(kind, options, filter_until)
                else:
                    removed, reclaimed = await self._remove_by_id(kind, options)
            except Exception as e:
                self.logger.error("Cleanup failed", kind=kind.value, error=str(e))
                result.failures[kind].append(str(e) or e.__class__.__name__)
                continue

            result.removed[kind] = removed
            result.reclaimed_bytes += reclaimed
            self.logger.info(
                "Cleaned resource kind",
                kind=kind.value,
                removed=removed,
                reclaimed=format_bytes(reclaimed),
            )

        self.logger.info(
            "Docker cleanup complete",
            reclaimed=format_bytes(result.reclaimed_bytes),
            failed_kinds=[kind.value for kind, errors in result.failures.items() if errors],
        )
        return result

    async def _prune(
        self, kind: ResourceKind, options: CleanOptions, filter_until: str | None
    ) -> tuple[int, int]:
        output = await self.docker.prune(
            kind,
            filter_until,
            include_all_images=options.include_all_images and kind == ResourceKind.IMAGES,
        )
        # Prune output format drifts between Docker versions; fall back to the scan count
        removed = parse_pruned_count(output) or options.expected_counts.get(kind, 0)
        return removed, parse_reclaimed_bytes(output)

    async def _remove_by_id(self, kind: ResourceKind, options: CleanOptions) -> tuple[int, int]:
        ids = (options.selected_ids or {}).get(kind) or []
        if not ids:
            return 0, 0

        await self.docker.remove(kind, ids)
        # docker rm doesn't report reclaimed space; use the scan estimate
        reclaimed = (options.estimated_bytes or {}).get(kind, 0)
        return len(ids), reclaimed
