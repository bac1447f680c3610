"""Constants shared across docklean services."""

import re

from .models.enums import ResourceKind

# Image repository/tag placeholder for untagged images
NONE_SENTINEL = "<none>"

# Container states considered stopped
STOPPED_CONTAINER_STATES = frozenset({"exited", "dead"})

# Networks created by the Docker daemon itself; never removable
SYSTEM_NETWORKS = frozenset({"bridge", "host", "none"})

# Summary labels per resource kind
SUMMARY_LABELS: dict[ResourceKind, str] = {
    ResourceKind.CONTAINERS: "Stopped containers",
    ResourceKind.IMAGES: "Dangling images",
    ResourceKind.VOLUMES: "Unused volumes",
    ResourceKind.NETWORKS: "Unused networks",
    ResourceKind.CACHE: "Builder cache",
}
ALL_IMAGES_LABEL = "Unused images"

# Free-text patterns in docker prune / dry-run output
TOTAL_RECLAIMABLE_PATTERN = re.compile(
    r"Total reclaimable:\s*([0-9.]+\s*[A-Za-z]+)", re.IGNORECASE
)
TOTAL_RECLAIMED_PATTERN = re.compile(
    r"Total reclaimed space:\s*([0-9.]+\s*[A-Za-z]+)", re.IGNORECASE
)
DELETED_COUNT_PATTERN = re.compile(
    r"^Deleted (?:Containers|Images|Volumes|Networks):[ \t]*([0-9]+)[ \t]*$",
    re.IGNORECASE | re.MULTILINE,
)
