"""
Fixture Container Errors

Exception hierarchy shared by the builder, runner and running-container handle.
"""

from typing import Optional


class FixtureContainerError(Exception):
    """Base class for all fixture container errors."""
    pass


class ConfigurationError(FixtureContainerError):
    """Raised when a container specification is missing or has invalid fields."""
    pass


class EngineCommunicationError(FixtureContainerError):
    """Raised when a call to the container engine fails."""
    pass


class StartupTimeoutError(FixtureContainerError):
    """Raised when a container does not become ready within the startup timeout.

    The container is left in place so its logs can be inspected.
    """

    def __init__(
        self,
        name: str,
        timeout: float,
        status: Optional[str] = None,
        health: Optional[str] = None
    ):
        self.name = name
        self.timeout = timeout
        self.status = status
        self.health = health
        super().__init__(
            f"Container {name} failed to become ready within {timeout}s "
            f"(status={status}, health={health})"
        )


class StartupCancelledError(FixtureContainerError):
    """Raised when waiting for container readiness is cancelled by the caller."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Startup of container {name} was cancelled")
