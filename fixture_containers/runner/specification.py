"""
Container Specification

Immutable description of one disposable container and the chainable builder
used to assemble it.
"""

from datetime import timedelta
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError

if TYPE_CHECKING:
    from .runner import ContainerRunner


class HealthProbe(BaseModel):
    """
    Readiness probe handed to the container engine.

    Attributes:
        command: Probe command, e.g. ("CMD-SHELL", "pg_isready -U postgres")
        interval: Time between probe runs
        timeout: Time allowed for a single probe run
        start_period: Grace period before failed probes count
        retries: Consecutive failures before the container is unhealthy
    """

    model_config = ConfigDict(frozen=True)

    command: Tuple[str, ...] = Field(min_length=1)
    interval: timedelta = timedelta(milliseconds=250)
    timeout: timedelta = timedelta(milliseconds=100)
    start_period: timedelta = timedelta(milliseconds=500)
    retries: int = Field(default=5, ge=0)


class PortBinding(BaseModel):
    """Maps a container port to a loopback host port."""

    model_config = ConfigDict(frozen=True)

    host_port: int = Field(ge=0, le=65535)
    container_port: int = Field(ge=0, le=65535)


class ContainerSpecification(BaseModel):
    """
    Desired state of one fixture container.

    The name is used as-is as the engine's container identifier.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    image: str = Field(min_length=1)
    port_bindings: Tuple[PortBinding, ...] = ()
    environment_variables: Tuple[Tuple[str, str], ...] = ()
    health_probe: Optional[HealthProbe] = None

    def environment_list(self) -> List[str]:
        """Environment variables formatted as KEY=VALUE strings."""
        return [f"{key}={value}" for key, value in self.environment_variables]


def build_specification(
    name: str,
    image: Optional[str],
    port_bindings: Iterable[Tuple[int, int]] = (),
    environment: Iterable[Tuple[str, str]] = (),
    health_probe: Optional[HealthProbe] = None
) -> ContainerSpecification:
    """
    Validate inputs and create a ContainerSpecification.

    Args:
        name: Container name
        image: Registry-qualified image reference
        port_bindings: (host_port, container_port) pairs in order
        environment: (key, value) pairs in order
        health_probe: Optional readiness probe

    Raises:
        ConfigurationError: If the image is missing or a field is invalid
    """
    if not image:
        raise ConfigurationError("Image must be set")

    try:
        return ContainerSpecification(
            name=name,
            image=image,
            port_bindings=tuple(
                PortBinding(host_port=host_port, container_port=container_port)
                for host_port, container_port in port_bindings
            ),
            environment_variables=tuple((str(k), str(v)) for k, v in environment),
            health_probe=health_probe,
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid container specification for {name!r}: {e}") from e


class ContainerRunnerBuilder:
    """Accumulates a container specification through chained calls."""

    def __init__(self, name: str, engine: Any = None):
        self.name = name
        self._engine = engine
        self._image: Optional[str] = None
        self._port_bindings: List[Tuple[int, int]] = []
        self._env_vars: List[Tuple[str, str]] = []
        self._health_probe: Optional[HealthProbe] = None

    def image(self, image: str) -> 'ContainerRunnerBuilder':
        self._image = image
        return self

    def add_port_binding(self, host_port: int, container_port: int) -> 'ContainerRunnerBuilder':
        self._port_bindings.append((host_port, container_port))
        return self

    def add_env_var(self, key: str, value: str) -> 'ContainerRunnerBuilder':
        self._env_vars.append((key, value))
        return self

    def healthcheck(self, probe: HealthProbe) -> 'ContainerRunnerBuilder':
        self._health_probe = probe
        return self

    def specification(self) -> ContainerSpecification:
        """Finalize the accumulated state without contacting the engine."""
        return build_specification(
            name=self.name,
            image=self._image,
            port_bindings=self._port_bindings,
            environment=self._env_vars,
            health_probe=self._health_probe,
        )

    def build(self, **runner_options: Any) -> 'ContainerRunner':
        """
        Finalize the specification and return a runner for it.

        Raises:
            ConfigurationError: If the image was never set
        """
        from .runner import ContainerRunner

        return ContainerRunner(self.specification(), engine=self._engine, **runner_options)
