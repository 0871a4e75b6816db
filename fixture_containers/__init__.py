"""
Fixture Containers

Disposable service containers (PostgreSQL, MySQL, ...) for use as test
fixtures, with explicit, deterministic teardown.
"""

from fixture_containers.runner import (
    ConfigurationError,
    ContainerRunner,
    ContainerRunnerBuilder,
    ContainerSpecification,
    EngineClient,
    EngineCommunicationError,
    FixtureContainerError,
    HealthProbe,
    PullPolicy,
    RunningContainer,
    StartupCancelledError,
    StartupTimeoutError,
    build_specification
)

__version__ = "0.1.0"

__all__ = [
    'ConfigurationError',
    'ContainerRunner',
    'ContainerRunnerBuilder',
    'ContainerSpecification',
    'EngineClient',
    'EngineCommunicationError',
    'FixtureContainerError',
    'HealthProbe',
    'PullPolicy',
    'RunningContainer',
    'StartupCancelledError',
    'StartupTimeoutError',
    'build_specification'
]
