"""
Docker Engine Client

Thin adapter over the docker SDK exposing only the operations the runner and
the running-container handle need. Every docker failure is re-raised as an
EngineCommunicationError carrying the engine's message.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import docker
import docker.errors
import docker.types

from .errors import EngineCommunicationError
from .specification import ContainerSpecification, HealthProbe

logger = logging.getLogger(__name__)

LOOPBACK_HOST_IP = "127.0.0.1"


@dataclass
class ContainerState:
    """
    Execution and health status reported by the engine.

    Attributes:
        status: Execution status, e.g. "created", "running", "exited"
        health: Health status ("starting", "healthy", "unhealthy") or None
            when the engine reports no health block
    """
    status: Optional[str]
    health: Optional[str] = None


def _nanoseconds(value: timedelta) -> int:
    return (value // timedelta(microseconds=1)) * 1000


def healthcheck_config(probe: HealthProbe) -> docker.types.Healthcheck:
    """Convert a HealthProbe into the engine's healthcheck configuration."""
    return docker.types.Healthcheck(
        test=list(probe.command),
        interval=_nanoseconds(probe.interval),
        timeout=_nanoseconds(probe.timeout),
        retries=probe.retries,
        start_period=_nanoseconds(probe.start_period),
    )


def port_binding_map(specification: ContainerSpecification) -> Dict[int, List[Tuple[str, int]]]:
    """
    Group port bindings by container port.

    Every binding for a container port is kept, in insertion order, bound to
    the loopback interface. Conflicts are left for the engine to resolve.
    """
    bindings: Dict[int, List[Tuple[str, int]]] = {}
    for binding in specification.port_bindings:
        bindings.setdefault(binding.container_port, []).append(
            (LOOPBACK_HOST_IP, binding.host_port)
        )
    return bindings


class EngineClient:
    """Container engine operations used by the fixture runner."""

    def __init__(self, docker_client: Any):
        """
        Initialize EngineClient.

        Args:
            docker_client: A docker.DockerClient (or compatible double)
        """
        self.docker_client = docker_client

    @classmethod
    def from_env(cls) -> 'EngineClient':
        """Connect to the local engine using DOCKER_HOST and related defaults."""
        with _engine_call("connect"):
            return cls(docker.from_env())

    @property
    def api(self) -> Any:
        return self.docker_client.api

    def list_container_names(self) -> List[str]:
        """Names of all containers known to the engine, stopped ones included."""
        with _engine_call("list containers"):
            containers = self.api.containers(all=True)
        names = []
        for container in containers:
            names.extend(container.get('Names') or [])
        return names

    def list_image_tags(self) -> List[str]:
        """Repository tags of all locally available images."""
        with _engine_call("list images"):
            images = self.api.images()
        tags = []
        for image in images:
            tags.extend(image.get('RepoTags') or [])
        return tags

    def pull_image(self, image: str) -> None:
        """Pull an image, consuming the progress stream to completion."""
        with _engine_call("pull image", image):
            for event in self.api.pull(image, stream=True, decode=True):
                if 'error' in event:
                    raise EngineCommunicationError(
                        f"Failed to pull image {image}: {event['error']}"
                    )
                logger.debug(f"Pulling image {image}: {event}")

    def create_container(self, specification: ContainerSpecification) -> str:
        """
        Create (but do not start) a container for the specification.

        Returns:
            The engine's container id
        """
        bindings = port_binding_map(specification)
        healthcheck = None
        if specification.health_probe is not None:
            healthcheck = healthcheck_config(specification.health_probe)

        with _engine_call("create container", specification.name):
            host_config = self.api.create_host_config(
                port_bindings=bindings if bindings else None
            )
            response = self.api.create_container(
                image=specification.image,
                name=specification.name,
                environment=specification.environment_list(),
                ports=list(bindings) if bindings else None,
                host_config=host_config,
                healthcheck=healthcheck,
            )
        return response.get('Id', '')

    def start_container(self, name: str) -> None:
        with _engine_call("start container", name):
            self.api.start(name)

    def stop_container(self, name: str, timeout: Optional[int] = None) -> None:
        with _engine_call("stop container", name):
            self.api.stop(name, timeout=timeout)

    def remove_container(self, name: str) -> None:
        """Force-remove a container, stopping it first if it is running."""
        with _engine_call("remove container", name):
            self.api.remove_container(name, force=True)

    def inspect_state(self, name: str) -> ContainerState:
        with _engine_call("inspect container", name):
            details = self.api.inspect_container(name)
        state = details.get('State') or {}
        health = state.get('Health') or {}
        return ContainerState(status=state.get('Status'), health=health.get('Status'))

    def container_logs(self, name: str, tail: int = 50) -> str:
        with _engine_call("read logs", name):
            output = self.api.logs(name, tail=tail)
        if isinstance(output, bytes):
            return output.decode('utf-8', errors='replace')
        return output

    def close(self) -> None:
        """Close the underlying engine connection."""
        self.docker_client.close()


@contextmanager
def _engine_call(operation: str, target: Optional[str] = None) -> Iterator[None]:
    """Translate docker SDK and transport failures into EngineCommunicationError."""
    try:
        yield
    except EngineCommunicationError:
        raise
    except (docker.errors.DockerException, OSError) as e:
        subject = f" {target}" if target else ""
        raise EngineCommunicationError(f"Failed to {operation}{subject}: {e}") from e


def same_container_name(candidate: str, name: str) -> bool:
    """Match a listed container name against a target, with or without the leading '/'."""
    return candidate == name or candidate == f"/{name}"


def has_name(names: Sequence[str], name: str) -> bool:
    return any(same_container_name(candidate, name) for candidate in names)
