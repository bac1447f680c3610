"""docklean: find and clean unused Docker resources."""

__version__ = "0.1.0"
