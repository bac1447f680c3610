"""Data models for docklean."""

from .enums import (  # noqa: F401
    ALL_KINDS,
    DANGLING_KINDS,
    ExitCode,
    ResourceKind,
)
from .params import (  # noqa: F401
    CleanOptions,
    ScanOptions,
)
from .resources import (  # noqa: F401
    CleanResult,
    ResourceItem,
    ResourceSummary,
    ScanResult,
)

__all__ = [
    # Enums
    "ALL_KINDS",
    "DANGLING_KINDS",
    "ExitCode",
    "ResourceKind",
    # Parameter models
    "CleanOptions",
    "ScanOptions",
    # Result models
    "CleanResult",
    "ResourceItem",
    "ResourceSummary",
    "ScanResult",
]
