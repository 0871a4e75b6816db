"""
Running Container Handle

Returned by ContainerRunner.run(). Teardown is always explicit: the handle
never stops or removes its container on its own.
"""

import logging
from typing import Optional

from .engine import EngineClient

logger = logging.getLogger(__name__)


class RunningContainer:
    """
    Handle to a provisioned fixture container.

    The engine client is shared with the caller and is never closed here.
    """

    def __init__(self, name: str, engine: EngineClient):
        self.name = name
        self.engine = engine

    def start(self):
        self.engine.start_container(self.name)
        logger.info(f"Started container {self.name}")

    def stop(self, timeout: Optional[int] = None):
        """Request a graceful stop from the engine."""
        self.engine.stop_container(self.name, timeout=timeout)
        logger.info(f"Stopped container {self.name}")

    def remove(self):
        """Force-remove the container from the engine."""
        self.engine.remove_container(self.name)
        logger.info(f"Removed container {self.name}")

    def restart(self):
        """Stop then start the container. Does not wait for it to become healthy."""
        self.stop()
        self.start()

    def status(self) -> Optional[str]:
        return self.engine.inspect_state(self.name).status

    def logs(self, tail: int = 50) -> str:
        return self.engine.container_logs(self.name, tail=tail)

    def __repr__(self) -> str:
        return f"RunningContainer(name={self.name!r})"
