"""Scan and cleanup result models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .enums import ALL_KINDS, ResourceKind


class DockleanModel(BaseModel):
    """Base model with common docklean settings."""

    model_config = ConfigDict(populate_by_name=True)

    def model_dump(self, **kwargs) -> dict[str, Any]:
        """Convert to dict with exclude_none by default."""
        kwargs.setdefault("exclude_none", True)
        return super().model_dump(**kwargs)


class ResourceItem(DockleanModel):
    """One discovered unit of cleanable Docker state."""

    id: str = ""
    name: str = ""
    size: str | None = None
    created_at: str | None = Field(default=None, serialization_alias="createdAt")
    last_used: str | None = Field(default=None, serialization_alias="lastUsed")
    raw: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id", "name", mode="before")
    @classmethod
    def default_empty(cls, v: Any) -> str:
        """Identity fields are never None so formatting needs no special case."""
        return "" if v is None else str(v)


class ResourceSummary(DockleanModel):
    """Scan result for a single resource kind."""

    kind: ResourceKind = Field(serialization_alias="type")
    label: str
    items: list[ResourceItem] = Field(default_factory=list)
    reclaimable_bytes: int = Field(default=0, serialization_alias="reclaimableBytes")

    @property
    def count(self) -> int:
        return len(self.items)

    @property
    def ids(self) -> list[str]:
        return [item.id for item in self.items if item.id]


class ScanResult(DockleanModel):
    """Ordered per-kind summaries plus the total reclaimable estimate."""

    summaries: list[ResourceSummary] = Field(default_factory=list)
    total_reclaimable_bytes: int = Field(default=0, serialization_alias="totalReclaimableBytes")

    @computed_field(alias="totalItems")  # type: ignore[prop-decorator]
    @property
    def total_items(self) -> int:
        return sum(summary.count for summary in self.summaries)

    def get(self, kind: ResourceKind) -> ResourceSummary | None:
        for summary in self.summaries:
            if summary.kind == kind:
                return summary
        return None

    def expected_counts(self) -> dict[ResourceKind, int]:
        """Item counts per kind, used as a fallback when prune output can't be parsed."""
        counts = {kind: 0 for kind in ALL_KINDS}
        for summary in self.summaries:
            counts[summary.kind] = summary.count
        return counts

    def selected_ids(self) -> dict[ResourceKind, list[str]]:
        """Identifiers per kind, for removal by ID after size selection."""
        return {summary.kind: summary.ids for summary in self.summaries}

    def estimated_bytes(self) -> dict[ResourceKind, int]:
        return {summary.kind: summary.reclaimable_bytes for summary in self.summaries}

    def to_payload(self) -> dict[str, Any]:
        """Machine-readable document for --json output."""
        return self.model_dump(mode="json", by_alias=True)


def _zero_counts() -> dict[ResourceKind, int]:
    return {kind: 0 for kind in ALL_KINDS}


def _empty_failures() -> dict[ResourceKind, list[str]]:
    return {kind: [] for kind in ALL_KINDS}


class CleanResult(DockleanModel):
    """Per-kind removal counts and failures plus the aggregate reclaimed bytes."""

    removed: dict[ResourceKind, int] = Field(default_factory=_zero_counts)
    failures: dict[ResourceKind, list[str]] = Field(default_factory=_empty_failures)
    reclaimed_bytes: int = Field(default=0, serialization_alias="reclaimedBytes")

    @property
    def has_failures(self) -> bool:
        return any(self.failures.values())
