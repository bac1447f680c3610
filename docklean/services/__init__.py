"""
docklean Services

Service layer for scanning and cleaning Docker resources.
"""

from .cleanup import CleanupService  # noqa: F401
from .scan import ScanService  # noqa: F401

__all__ = [
    "ScanService",
    "CleanupService",
]
