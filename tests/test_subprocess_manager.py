"""Tests for subprocess execution."""

import asyncio
import os
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from docklean.core.exceptions import DockerCommandError
from docklean.core.subprocess_manager import SubprocessManager, SubprocessResult


@pytest.fixture
def subprocess_manager():
    """Create a subprocess manager for testing."""
    return SubprocessManager()


@pytest.mark.asyncio
class TestSubprocessManager:
    """Test subprocess manager functionality."""

    async def test_run_simple_command(self, subprocess_manager):
        """Test running a simple command."""
        result = await subprocess_manager.run_command(["echo", "hello"])
        assert result.success
        assert result.stdout.strip() == "hello"
        assert result.stderr == ""
        assert result.returncode == 0

    async def test_run_command_with_error(self, subprocess_manager):
        """Test command that returns non-zero exit code."""
        with pytest.raises(DockerCommandError) as exc_info:
            await subprocess_manager.run_command(["sh", "-c", "echo boom >&2; exit 1"], check=True)
        assert "exit code 1" in str(exc_info.value)
        assert "boom" in str(exc_info.value)

    async def test_run_command_no_check(self, subprocess_manager):
        """Test command with check=False doesn't raise on error."""
        result = await subprocess_manager.run_command(["sh", "-c", "exit 3"], check=False)
        assert not result.success
        assert result.returncode == 3

    async def test_check_uses_result_returncode_check(self, subprocess_manager):
        """Test that check=True delegates to SubprocessResult.check_returncode."""
        with patch.object(SubprocessResult, "check_returncode") as check_returncode:
            result = await subprocess_manager.run_command(["sh", "-c", "exit 2"], check=True)
        check_returncode.assert_called_once_with()
        assert result.returncode == 2

    async def test_missing_executable(self, subprocess_manager):
        """Test that a missing binary surfaces as DockerCommandError."""
        with pytest.raises(DockerCommandError, match="Executable not found"):
            await subprocess_manager.run_command(["definitely-not-a-real-binary-xyz"])

    async def test_command_timeout(self, subprocess_manager):
        """Test command timeout handling."""
        with pytest.raises(asyncio.TimeoutError) as exc_info:
            await subprocess_manager.run_command(["sleep", "10"], timeout=0.1)
        assert "timed out after 0.1 seconds" in str(exc_info.value)

    async def test_timeout_terminates_process(self, subprocess_manager):
        """Test that a timed out process is terminated."""
        process = MagicMock()
        process.pid = 4242
        process.communicate = AsyncMock(side_effect=asyncio.TimeoutError)
        process.wait = AsyncMock(return_value=0)

        with patch("asyncio.create_subprocess_exec", AsyncMock(return_value=process)):
            with pytest.raises(asyncio.TimeoutError):
                await subprocess_manager.run_command(["docker", "info"], timeout=1)

        process.terminate.assert_called_once()
        process.kill.assert_not_called()

    async def test_environment_variables(self, subprocess_manager):
        """Test passing environment variables."""
        result = await subprocess_manager.run_command(
            ["sh", "-c", "echo $DOCKLEAN_TEST"], env={**os.environ, "DOCKLEAN_TEST": "value"}
        )
        assert result.stdout.strip() == "value"


class TestSubprocessResult:
    """Test SubprocessResult behavior."""

    def test_check_returncode_success(self):
        result = SubprocessResult(0, "ok", "", ["true"])
        result.check_returncode()
        assert result.success

    def test_check_returncode_prefers_stderr(self):
        result = SubprocessResult(2, "out", "err", ["false"])
        with pytest.raises(DockerCommandError, match="exit code 2: err"):
            result.check_returncode()

    def test_check_returncode_without_output(self):
        result = SubprocessResult(1, "", "", ["false"])
        with pytest.raises(DockerCommandError, match="Command failed with exit code 1: Command failed"):
            result.check_returncode()
