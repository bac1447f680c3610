"""Shared pytest fixtures for docklean tests."""

from datetime import datetime
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from docklean.core.docker_cli import DockerCLI
from docklean.core.settings import DockleanSettings
from tests.helpers import NOW, days_ago


@pytest.fixture(autouse=True)
def captured_logs():
    """Capture structlog events so nothing is printed to stdout."""
    with structlog.testing.capture_logs() as logs:
        yield logs


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def sample_containers() -> list[dict[str, Any]]:
    return [
        {
            "ID": "abc123def456",
            "Names": "old-container",
            "State": "exited",
            "Size": "150 MB",
            "CreatedAt": days_ago(30),
            "Status": "Exited (0) 4 weeks ago",
        },
        {
            "ID": "xyz789uvw012",
            "Names": "recent-container",
            "State": "exited",
            "Size": "50 MB",
            "CreatedAt": days_ago(2),
            "RunningFor": "2 days ago",
        },
        {
            "ID": "running123",
            "Names": "active-container",
            "State": "running",
            "Size": "100 MB",
            "CreatedAt": days_ago(5),
        },
    ]


@pytest.fixture
def sample_images() -> list[dict[str, Any]]:
    return [
        {
            "ID": "sha256:aaa111",
            "Repository": "<none>",
            "Tag": "<none>",
            "Size": "500 MB",
            "CreatedAt": days_ago(60),
            "CreatedSince": "2 months ago",
        },
        {
            "ID": "sha256:bbb222",
            "Repository": "nginx",
            "Tag": "latest",
            "Size": "200 MB",
            "CreatedAt": days_ago(10),
        },
        {
            "ID": "sha256:ccc333",
            "Repository": "<none>",
            "Tag": "<none>",
            "Size": "300 MB",
            "CreatedAt": days_ago(90),
        },
    ]


@pytest.fixture
def sample_volumes() -> list[dict[str, Any]]:
    return [
        {"Name": "old-volume", "Driver": "local", "CreatedAt": days_ago(45)},
        {"Name": "recent-volume", "Driver": "local", "CreatedAt": days_ago(3)},
    ]


@pytest.fixture
def sample_networks() -> list[dict[str, Any]]:
    return [
        {"ID": "net123", "Name": "custom-network", "CreatedAt": days_ago(50)},
        {"ID": "net456", "Name": "bridge", "CreatedAt": days_ago(100)},
    ]


@pytest.fixture
def docker() -> MagicMock:
    """DockerCLI double with every docker call mocked and empty by default."""
    mock = MagicMock(spec=DockerCLI)
    mock.list_containers = AsyncMock(return_value=[])
    mock.list_images = AsyncMock(return_value=[])
    mock.list_volumes = AsyncMock(return_value=[])
    mock.list_networks = AsyncMock(return_value=[])
    mock.system_df = AsyncMock(return_value=[])
    mock.preview_cache_prune = AsyncMock(return_value="")
    mock.prune = AsyncMock(return_value="")
    mock.remove = AsyncMock(return_value="")
    mock.check = AsyncMock(return_value=None)
    return mock


@pytest.fixture
def settings() -> DockleanSettings:
    return DockleanSettings(DOCKER_BIN="docker", DOCKER_CLI_TIMEOUT=5, DOCKER_PRUNE_TIMEOUT=10)
