"""Enum definitions for docklean."""

from enum import Enum, IntEnum


class ResourceKind(str, Enum):
    """Kinds of Docker resources docklean can clean, in canonical order."""

    CONTAINERS = "containers"
    IMAGES = "images"
    VOLUMES = "volumes"
    NETWORKS = "networks"
    CACHE = "cache"


ALL_KINDS: tuple[ResourceKind, ...] = tuple(ResourceKind)
DANGLING_KINDS: tuple[ResourceKind, ...] = (
    ResourceKind.CONTAINERS,
    ResourceKind.IMAGES,
    ResourceKind.VOLUMES,
)


class ExitCode(IntEnum):
    """Process exit codes for the docklean CLI."""

    SUCCESS = 0
    DOCKER_NOT_FOUND = 1
    DOCKER_NOT_RUNNING = 2
    NOTHING_TO_CLEAN = 3
    FAILURE = 4
    INVALID_ARGUMENTS = 5
