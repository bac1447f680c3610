"""Docker CLI access for docklean.

Inventory, disk usage, prune and removal calls against the local ``docker``
executable. Listing calls use ``--format {{json .}}`` and return one dict
per JSON line; prune calls return the command's free-text stdout.
"""

import json
import shutil
from typing import Any

import structlog

from ..models.enums import ExitCode, ResourceKind
from .exceptions import DockerCommandError, DockerUnavailableError
from .settings import DockleanSettings
from .subprocess_manager import SubprocessManager

JSON_FORMAT = ["--format", "{{json .}}"]

PRUNE_COMMANDS: dict[ResourceKind, list[str]] = {
    ResourceKind.CONTAINERS: ["container", "prune", "-f"],
    ResourceKind.IMAGES: ["image", "prune", "-f"],
    # -a: anonymous and named unused volumes (Docker 23+ prunes anonymous only by default)
    ResourceKind.VOLUMES: ["volume", "prune", "-f", "-a"],
    ResourceKind.NETWORKS: ["network", "prune", "-f"],
    ResourceKind.CACHE: ["builder", "prune", "-f"],
}

REMOVE_COMMANDS: dict[ResourceKind, list[str]] = {
    ResourceKind.CONTAINERS: ["container", "rm", "-f"],
    ResourceKind.IMAGES: ["image", "rm", "-f"],
    ResourceKind.VOLUMES: ["volume", "rm", "-f"],
    ResourceKind.NETWORKS: ["network", "rm"],
}


def parse_json_lines(output: str) -> list[dict[str, Any]]:
    """Parse ``--format {{json .}}`` output, one object per non-blank line."""
    records = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as e:
            raise DockerCommandError(f"Unexpected docker output: {line[:80]}") from e
    return records


def _until_filter(filter_until: str | None) -> list[str]:
    return ["--filter", f"until={filter_until}"] if filter_until else []


def build_prune_args(
    kind: ResourceKind, filter_until: str | None = None, include_all_images: bool = False
) -> list[str]:
    """Build ``docker ... prune`` arguments (without the executable)."""
    args = list(PRUNE_COMMANDS[kind])
    if kind == ResourceKind.IMAGES and include_all_images:
        args.append("-a")
    args.extend(_until_filter(filter_until))
    return args


def build_cache_preview_args(filter_until: str | None = None) -> list[str]:
    """Build the build-cache dry-run arguments (without the executable)."""
    return ["buildx", "prune", "--dry-run", *_until_filter(filter_until)]


class DockerCLI:
    """Runs docker commands one at a time through the subprocess manager."""

    def __init__(
        self,
        settings: DockleanSettings | None = None,
        subprocess_manager: SubprocessManager | None = None,
    ):
        self.settings = settings or DockleanSettings()
        self.subprocess_manager = subprocess_manager or SubprocessManager()
        self._docker_bin = shutil.which(self.settings.docker_bin) or self.settings.docker_bin
        self.logger = structlog.get_logger().bind(component="DockerCLI")

    async def run(self, args: list[str], timeout: int | None = None) -> str:
        """Run a docker command and return its stdout.

        Raises:
            DockerCommandError: non-zero exit or missing executable
        """
        result = await self.subprocess_manager.run_command(
            [self._docker_bin, *args],
            timeout=timeout or self.settings.docker_cli_timeout,
        )
        return result.stdout

    async def _list(self, args: list[str]) -> list[dict[str, Any]]:
        return parse_json_lines(await self.run(args))

    async def check(self) -> None:
        """Verify that the docker CLI exists and the daemon answers.

        Raises:
            DockerUnavailableError: with exit code 1 (no CLI) or 2 (no daemon)
        """
        try:
            await self.run(["--version"])
        except (DockerCommandError, TimeoutError) as e:
            self.logger.debug("Docker CLI check failed", error=str(e))
            raise DockerUnavailableError(
                "Docker CLI not found.", ExitCode.DOCKER_NOT_FOUND
            ) from e

        try:
            await self.run(["info"])
        except (DockerCommandError, TimeoutError) as e:
            self.logger.debug("Docker daemon check failed", error=str(e))
            raise DockerUnavailableError(
                "Docker daemon is not running.", ExitCode.DOCKER_NOT_RUNNING
            ) from e

    async def list_containers(self) -> list[dict[str, Any]]:
        return await self._list(["ps", "-a", *JSON_FORMAT])

    async def list_images(self) -> list[dict[str, Any]]:
        return await self._list(["images", "--digests", *JSON_FORMAT])

    async def list_volumes(self, dangling_only: bool = True) -> list[dict[str, Any]]:
        args = ["volume", "ls", *JSON_FORMAT]
        if dangling_only:
            args.extend(["--filter", "dangling=true"])
        return await self._list(args)

    async def list_networks(self, dangling_only: bool = True) -> list[dict[str, Any]]:
        args = ["network", "ls", *JSON_FORMAT]
        if dangling_only:
            args.extend(["--filter", "dangling=true"])
        return await self._list(args)

    async def system_df(self) -> list[dict[str, Any]]:
        """Disk usage summary rows from ``docker system df``."""
        return await self._list(["system", "df", *JSON_FORMAT])

    async def preview_cache_prune(self, filter_until: str | None = None) -> str:
        """Dry-run the build cache prune and return its output.

        Older CLIs without ``buildx prune --dry-run`` fall back to the real
        ``builder prune``, so the estimate may itself reclaim the cache.
        """
        try:
            return await self.run(build_cache_preview_args(filter_until))
        except DockerCommandError as e:
            self.logger.warning(
                "Build cache dry-run unavailable, running real prune to estimate",
                error=str(e),
            )
            return await self.run(
                build_prune_args(ResourceKind.CACHE, filter_until),
                timeout=self.settings.docker_prune_timeout,
            )

    async def prune(
        self,
        kind: ResourceKind,
        filter_until: str | None = None,
        include_all_images: bool = False,
    ) -> str:
        args = build_prune_args(kind, filter_until, include_all_images)
        self.logger.info("Pruning resources", kind=kind.value, command=" ".join(args))
        return await self.run(args, timeout=self.settings.docker_prune_timeout)

    async def remove(self, kind: ResourceKind, ids: list[str]) -> str:
        """Remove resources of one kind by identifier."""
        if kind not in REMOVE_COMMANDS:
            raise DockerCommandError(f"{kind.value} cannot be removed by identifier")
        if not ids:
            return ""
        self.logger.info("Removing resources by id", kind=kind.value, count=len(ids))
        return await self.run(
            [*REMOVE_COMMANDS[kind], *ids], timeout=self.settings.docker_prune_timeout
        )
