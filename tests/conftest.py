"""
Centralized test configuration and fixtures for fixture_containers.

This module provides:
1. An in-memory stand-in for the docker low-level API so the runner can be
   exercised without a Docker daemon
2. Engine client fixtures built on that stand-in
3. Marker registration for integration tests that need a real daemon
"""

import logging
from typing import Any, Dict, List, Optional

import docker.errors
import pytest

from fixture_containers.runner.engine import EngineClient

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FakeDockerAPI:
    """
    Simulated docker.APIClient covering the calls made by EngineClient.

    Containers are kept by name. Starting a container marks it running and,
    when a healthcheck was configured, sets its health to `health_on_start`.
    """

    def __init__(self, images: Optional[List[str]] = None, health_on_start: str = 'healthy'):
        self.image_tags: List[str] = list(images or [])
        self.health_on_start = health_on_start
        self.containers_by_name: Dict[str, Dict[str, Any]] = {}
        self.calls: List[tuple] = []
        self.pulled: List[str] = []
        self.inspect_count = 0

    def add_container(self, name: str, status: str = 'running', health: Optional[str] = None):
        self.containers_by_name[name] = {
            'Id': f"id-{name}",
            'status': status,
            'health': health,
            'config': {},
        }

    def containers(self, all: bool = False):
        self.calls.append(('containers', all))
        return [
            {'Id': c['Id'], 'Names': [f"/{name}"]}
            for name, c in self.containers_by_name.items()
            if all or c['status'] == 'running'
        ]

    def images(self):
        self.calls.append(('images',))
        return [{'Id': f"sha256:{i}", 'RepoTags': [tag]} for i, tag in enumerate(self.image_tags)]

    def pull(self, repository: str, stream: bool = False, decode: bool = False):
        self.calls.append(('pull', repository))
        self.pulled.append(repository)
        self.image_tags.append(repository)
        yield {'status': f"Pulling from {repository}"}
        yield {'status': 'Download complete'}

    def create_host_config(self, port_bindings=None):
        return {'PortBindings': port_bindings}

    def create_container(self, image, name=None, environment=None, ports=None,
                         host_config=None, healthcheck=None):
        self.calls.append(('create_container', name))
        if name in self.containers_by_name:
            raise docker.errors.APIError(
                f'Conflict. The container name "/{name}" is already in use'
            )
        self.add_container(name, status='created')
        self.containers_by_name[name]['config'] = {
            'image': image,
            'environment': environment,
            'ports': ports,
            'host_config': host_config,
            'healthcheck': healthcheck,
        }
        return {'Id': f"id-{name}", 'Warnings': []}

    def _get(self, name: str) -> Dict[str, Any]:
        if name not in self.containers_by_name:
            raise docker.errors.NotFound(f"No such container: {name}")
        return self.containers_by_name[name]

    def start(self, name: str):
        self.calls.append(('start', name))
        container = self._get(name)
        container['status'] = 'running'
        if container['config'].get('healthcheck') is not None:
            container['health'] = self.health_on_start

    def stop(self, name: str, timeout: Optional[int] = None):
        self.calls.append(('stop', name))
        self._get(name)['status'] = 'exited'

    def remove_container(self, name: str, force: bool = False):
        self.calls.append(('remove_container', name, force))
        self._get(name)
        del self.containers_by_name[name]

    def inspect_container(self, name: str):
        self.inspect_count += 1
        container = self._get(name)
        state: Dict[str, Any] = {'Status': container['status']}
        if container['health'] is not None:
            state['Health'] = {'Status': container['health']}
        return {'Id': container['Id'], 'State': state}

    def logs(self, name: str, tail: int = 50):
        self._get(name)
        return b"database system is ready to accept connections\n"


class FakeDockerClient:
    """Minimal docker.DockerClient exposing a FakeDockerAPI."""

    def __init__(self, api: FakeDockerAPI):
        self.api = api
        self.closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def fake_api():
    """Simulated docker API with no containers and no local images."""
    return FakeDockerAPI()


@pytest.fixture
def engine(fake_api):
    """EngineClient backed by the simulated docker API."""
    return EngineClient(FakeDockerClient(fake_api))


def docker_available() -> bool:
    """Check whether a Docker daemon is reachable."""
    try:
        client = docker.from_env()
        client.ping()
        client.close()
        return True
    except (docker.errors.DockerException, OSError):
        return False


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "docker: mark test as requiring Docker")


def pytest_collection_modifyitems(config, items):
    """Mark integration tests and skip them when no Docker daemon is reachable."""
    integration_items = [item for item in items if "integration" in str(item.fspath)]
    if not integration_items:
        return

    skip_docker = None
    if not docker_available():
        skip_docker = pytest.mark.skip(reason="Docker daemon not available")

    for item in integration_items:
        item.add_marker(pytest.mark.integration)
        item.add_marker(pytest.mark.docker)
        if skip_docker is not None:
            item.add_marker(skip_docker)
