"""
MySQL fixture containers

Default database settings:
    database: mysqldb
    user: root-demo
    password / root password: pass
    container port: 3306, bound to the requested host port on 127.0.0.1
"""

from datetime import timedelta
from typing import Optional

from fixture_containers.config.image_config import ImageConfig
from fixture_containers.runner.engine import EngineClient
from fixture_containers.runner.running import RunningContainer
from fixture_containers.runner.specification import ContainerRunnerBuilder, HealthProbe

CONTAINER_PORT = 3306
DEFAULT_DATABASE = 'mysqldb'
DEFAULT_USER = 'root-demo'
DEFAULT_PASSWORD = 'pass'
ROOT_PASSWORD = 'pass'


def container_name(name: str, port: int) -> str:
    return f"mysql_{name}-{port}"


def health_probe() -> HealthProbe:
    return HealthProbe(
        command=(
            "CMD-SHELL",
            f"mysqladmin ping --host=127.0.0.1 --port={CONTAINER_PORT} --password={ROOT_PASSWORD}",
        ),
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
    return f"mysql://{user}:{password}@{host}:{port}/{database}"


def running_container(
    name: str,
    port: int,
    container_registry: Optional[str] = None,
    engine: Optional[EngineClient] = None,
    config: Optional[ImageConfig] = None
) -> RunningContainer:
    """
    Start a MySQL container with the default database settings.

    Args:
        name: Fixture name, combined with the port into the container name
        port: Host port bound to the container's 3306
        container_registry: Registry prefix overriding MYSQL_CONTAINER_REGISTRY
        engine: Engine client to use (a local one is opened if omitted)
        config: Image configuration (read from the environment if omitted)
    """
    config = config or ImageConfig()
    builder = (
        ContainerRunnerBuilder(container_name(name, port), engine=engine)
        .image(config.get_image('mysql', container_registry))
        .add_port_binding(port, CONTAINER_PORT)
        .add_env_var('MYSQL_ROOT_PASSWORD', ROOT_PASSWORD)
        .add_env_var('MYSQL_DATABASE', DEFAULT_DATABASE)
        .add_env_var('MYSQL_USER', DEFAULT_USER)
        .add_env_var('MYSQL_PASSWORD', DEFAULT_PASSWORD)
        .healthcheck(health_probe())
    )
    return builder.build().run(timeout=config.startup_timeout, poll_interval=config.poll_interval)
