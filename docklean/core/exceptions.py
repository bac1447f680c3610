"""Core exceptions for docklean operations."""


class DockleanError(Exception):
    """Base exception for docklean operations."""


class DockerCommandError(DockleanError):
    """Docker command execution failed."""


class DockerUnavailableError(DockleanError):
    """Docker CLI or daemon is not usable; carries the process exit code."""

    def __init__(self, message: str, exit_code: int):
        super().__init__(message)
        self.exit_code = exit_code


class InvalidArgumentError(DockleanError):
    """User-supplied selection or threshold argument is invalid."""


class ConfigurationError(DockleanError):
    """Configuration validation or loading failed."""
