"""
Container lifecycle package.

Builds container specifications, reconciles them against the container engine
and hands back explicit-teardown handles.
"""

from .engine import ContainerState, EngineClient
from .errors import (
    ConfigurationError,
    EngineCommunicationError,
    FixtureContainerError,
    StartupCancelledError,
    StartupTimeoutError
)
from .runner import ContainerRunner, PullPolicy, RunnerState
from .running import RunningContainer
from .specification import (
    ContainerRunnerBuilder,
    ContainerSpecification,
    HealthProbe,
    PortBinding,
    build_specification
)

__all__ = [
    'ConfigurationError',
    'ContainerRunner',
    'ContainerRunnerBuilder',
    'ContainerSpecification',
    'ContainerState',
    'EngineClient',
    'EngineCommunicationError',
    'FixtureContainerError',
    'HealthProbe',
    'PortBinding',
    'PullPolicy',
    'RunnerState',
    'RunningContainer',
    'StartupCancelledError',
    'StartupTimeoutError',
    'build_specification'
]
