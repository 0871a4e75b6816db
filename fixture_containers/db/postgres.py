"""
PostgreSQL fixture containers

Default database settings:
    database: postgres
    user: postgres
    password: pass
    container port: 5432, bound to the requested host port on 127.0.0.1
"""

import logging
from datetime import timedelta
from typing import Optional

from fixture_containers.config.image_config import ImageConfig
from fixture_containers.runner.engine import EngineClient
from fixture_containers.runner.running import RunningContainer
from fixture_containers.runner.specification import ContainerRunnerBuilder, HealthProbe

logger = logging.getLogger(__name__)

CONTAINER_PORT = 5432
DEFAULT_USER = 'postgres'
DEFAULT_PASSWORD = 'pass'
DEFAULT_DATABASE = 'postgres'


def container_name(name: str, port: int) -> str:
    """Fixture container name; the host port is embedded to keep parallel fixtures apart."""
    return f"pg_{name}-{port}"


def health_probe(user: str = DEFAULT_USER) -> HealthProbe:
    return HealthProbe(
        command=("CMD-SHELL", f"pg_isready -U {user}"),
        interval=timedelta(milliseconds=250),
        timeout=timedelta(milliseconds=100),
        retries=5,
        start_period=timedelta(milliseconds=500),
    )


def database_url(
    port: int,
    user: str = DEFAULT_USER,
    password: str = DEFAULT_PASSWORD,
    database: str = DEFAULT_DATABASE,
    host: str = '127.0.0.1'
) -> str:
    """Connection URL for a PostgreSQL fixture container."""
    return f"postgres://{user}:{password}@{host}:{port}/{database}"


def running_container(
    name: str,
    port: int,
    container_registry: Optional[str] = None,
    engine: Optional[EngineClient] = None,
    config: Optional[ImageConfig] = None
) -> RunningContainer:
    """
    Start a PostgreSQL container with the default database settings.

    Args:
        name: Fixture name, combined with the port into the container name
        port: Host port bound to the container's 5432
        container_registry: Registry prefix overriding PG_CONTAINER_REGISTRY
        engine: Engine client to use (a local one is opened if omitted)
        config: Image configuration (read from the environment if omitted)

    Returns:
        Handle for the running, healthy container
    """
    config = config or ImageConfig()
    builder = (
        ContainerRunnerBuilder(container_name(name, port), engine=engine)
        .image(config.get_image('postgres', container_registry))
        .add_port_binding(port, CONTAINER_PORT)
        .add_env_var('POSTGRES_PASSWORD', DEFAULT_PASSWORD)
        .healthcheck(health_probe())
    )
    return builder.build().run(timeout=config.startup_timeout, poll_interval=config.poll_interval)


def running_container_with(
    name: str,
    user: str,
    password: str,
    database: str,
    port: int,
    container_registry: Optional[str] = None,
    engine: Optional[EngineClient] = None,
    config: Optional[ImageConfig] = None
) -> RunningContainer:
    """Start a PostgreSQL container with a custom user, password and database."""
    config = config or ImageConfig()
    builder = (
        ContainerRunnerBuilder(container_name(name, port), engine=engine)
        .image(config.get_image('postgres', container_registry))
        .add_env_var('POSTGRES_USER', user)
        .add_env_var('POSTGRES_PASSWORD', password)
        .add_env_var('POSTGRES_DB', database)
        .add_port_binding(port, CONTAINER_PORT)
        .healthcheck(health_probe(user))
    )
    logger.debug(f"Starting PostgreSQL fixture {builder.name} for database {database}")
    return builder.build().run(timeout=config.startup_timeout, poll_interval=config.poll_interval)
