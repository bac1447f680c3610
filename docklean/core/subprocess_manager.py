"""Subprocess execution for Docker CLI calls with timeout handling."""

import asyncio
import os
from typing import Any, Optional

import structlog

from docklean.core.exceptions import DockerCommandError

logger = structlog.get_logger()

DEFAULT_TIMEOUT = 60  # Default timeout in seconds
KILL_TIMEOUT = 5  # Time to wait after SIGTERM before SIGKILL


class SubprocessResult:
    """Result of a subprocess execution."""

    def __init__(
        self,
        returncode: int,
        stdout: str,
        stderr: str,
        cmd: list[str],
    ):
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.cmd = cmd

    @property
    def success(self) -> bool:
        """Check if the command succeeded."""
        return self.returncode == 0

    def check_returncode(self):
        """Raise an exception if the command failed."""
        if self.returncode != 0:
            raise DockerCommandError(_failure_message(self.returncode, self.stdout, self.stderr))


def _failure_message(returncode: int, stdout: str, stderr: str) -> str:
    error_msg = stderr.strip() if stderr else stdout.strip() if stdout else "Command failed"
    return f"Command failed with exit code {returncode}: {error_msg}"


class SubprocessManager:
    """Runs one command at a time and waits for it to finish."""

    async def run_command(
        self,
        cmd: list[str],
        *,
        timeout: Optional[float] = None,
        check: bool = True,
        env: Optional[dict[str, str]] = None,
    ) -> SubprocessResult:
        """
        Run a command asynchronously and capture its text output.

        Args:
            cmd: Command and arguments as a list
            timeout: Timeout in seconds (default: DEFAULT_TIMEOUT)
            check: Raise exception if command fails
            env: Environment variables

        Returns:
            SubprocessResult with returncode, stdout, and stderr

        Raises:
            DockerCommandError: If the executable is missing, or check=True and command fails
            asyncio.TimeoutError: If command times out
        """
        if timeout is None:
            timeout = DEFAULT_TIMEOUT

        logger.debug("Executing command", command=" ".join(cmd), timeout=timeout)

        kwargs: dict[str, Any] = {
            "env": env or os.environ.copy(),
            "stdout": asyncio.subprocess.PIPE,
            "stderr": asyncio.subprocess.PIPE,
        }

        try:
            process = await asyncio.create_subprocess_exec(*cmd, **kwargs)  # nosec B603
        except FileNotFoundError as e:
            raise DockerCommandError(f"Executable not found: {cmd[0]}") from e

        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(
                process.communicate(), timeout=timeout
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Command timed out, terminating process",
                command=" ".join(cmd),
                timeout=timeout,
                pid=process.pid,
            )
            await self._terminate(process)
            raise asyncio.TimeoutError(
                f"Command timed out after {timeout} seconds: {' '.join(cmd)}"
            ) from None

        stdout = stdout_bytes.decode(errors="replace") if stdout_bytes else ""
        stderr = stderr_bytes.decode(errors="replace") if stderr_bytes else ""

        result = SubprocessResult(
            returncode=process.returncode or 0,
            stdout=stdout,
            stderr=stderr,
            cmd=cmd,
        )

        if check:
            result.check_returncode()

        return result

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        # Try graceful termination first
        try:
            process.terminate()
            await asyncio.wait_for(process.wait(), timeout=KILL_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(
                "Process did not terminate gracefully, sending SIGKILL", pid=process.pid
            )
            process.kill()
            await process.wait()
        except ProcessLookupError:
            # Process already terminated
            pass

