"""Parameter models for the scan and cleanup services."""

from datetime import timedelta

from pydantic import Field, field_validator, model_validator

from ..core.exceptions import InvalidArgumentError
from .enums import ALL_KINDS, ResourceKind
from .resources import DockleanModel


def _dedupe_kinds(kinds: list[ResourceKind]) -> list[ResourceKind]:
    seen: list[ResourceKind] = []
    for kind in kinds:
        if kind not in seen:
            seen.append(kind)
    return seen


class ScanOptions(DockleanModel):
    """What to scan and how to narrow the result."""

    kinds: list[ResourceKind] = Field(default_factory=lambda: list(ALL_KINDS))
    older_than: timedelta | None = Field(
        default=None, description="Age threshold relative to now"
    )
    include_all_images: bool = Field(
        default=False, description="Treat every image as a candidate, not only dangling ones"
    )
    top: int | None = Field(default=None, description="Keep only the N largest items per kind")
    limit_bytes: int | None = Field(
        default=None, description="Keep the largest items until this many bytes are covered"
    )

    @field_validator("kinds")
    @classmethod
    def validate_kinds(cls, v: list[ResourceKind]) -> list[ResourceKind]:
        return _dedupe_kinds(v)

    @model_validator(mode="after")
    def validate_size_selection(self) -> "ScanOptions":
        """Top N and cumulative limit are mutually exclusive and must be positive.

        InvalidArgumentError is not a ValueError, so pydantic lets it propagate
        to the caller unchanged.
        """
        if self.top is not None and self.limit_bytes is not None:
            raise InvalidArgumentError("Use either --top or --limit-space, not both.")
        if self.top is not None and self.top <= 0:
            raise InvalidArgumentError("--top must be a positive integer")
        if self.limit_bytes is not None and self.limit_bytes <= 0:
            raise InvalidArgumentError("--limit-space must be greater than zero")
        return self

    @property
    def size_selection_active(self) -> bool:
        return self.top is not None or self.limit_bytes is not None


class CleanOptions(DockleanModel):
    """Inputs for a cleanup pass following a scan."""

    kinds: list[ResourceKind] = Field(default_factory=list)
    older_than: timedelta | None = None
    dry_run: bool = False
    include_all_images: bool = False
    expected_counts: dict[ResourceKind, int] = Field(default_factory=dict)
    # Present only when size selection narrowed the scan; switches to removal by ID
    selected_ids: dict[ResourceKind, list[str]] | None = None
    estimated_bytes: dict[ResourceKind, int] | None = None

    @field_validator("kinds")
    @classmethod
    def validate_kinds(cls, v: list[ResourceKind]) -> list[ResourceKind]:
        return _dedupe_kinds(v)

    @property
    def use_bulk_prune(self) -> bool:
        return self.selected_ids is None
