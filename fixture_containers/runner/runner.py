"""
Reconciling Container Runner

Drives one container specification to a running, healthy container:
remove any same-named container, make sure the image is available, create and
start the container, then poll until it is ready or the startup timeout runs out.
"""

import logging
import threading
import time
from enum import Enum
from typing import Optional

from .engine import ContainerState, EngineClient, has_name
from .errors import StartupCancelledError, StartupTimeoutError
from .running import RunningContainer
from .specification import ContainerSpecification

logger = logging.getLogger(__name__)

DEFAULT_STARTUP_TIMEOUT = 30.0
DEFAULT_POLL_INTERVAL = 0.1


class PullPolicy(str, Enum):
    """When the runner pulls the container image."""
    IF_NOT_PRESENT = "if_not_present"
    ALWAYS = "always"


class RunnerState(str, Enum):
    """Reconciliation steps, recorded on the runner as it progresses."""
    IDLE = "idle"
    PREFLIGHT_CHECK = "preflight_check"
    REMOVING = "removing"
    IMAGE_CHECK = "image_check"
    PULLING = "pulling"
    CREATED = "created"
    STARTED = "started"
    POLLING_HEALTH = "polling_health"
    HEALTHY = "healthy"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    FAILED = "failed"


def is_ready(state: ContainerState, probe_configured: bool) -> bool:
    """
    Decide whether a container is ready for use.

    A running container is ready only when the engine reports it healthy.
    Without a health block it is ready only if no probe was configured.
    """
    if state.status != "running":
        return False
    if state.health is not None:
        return state.health == "healthy"
    return not probe_configured


class ContainerRunner:
    """Reconciles a ContainerSpecification against the container engine."""

    def __init__(
        self,
        specification: ContainerSpecification,
        engine: Optional[EngineClient] = None,
        pull_policy: PullPolicy = PullPolicy.IF_NOT_PRESENT
    ):
        """
        Initialize ContainerRunner.

        Args:
            specification: Desired container state
            engine: Engine client to use; a local one is opened on run() if omitted
            pull_policy: Whether to pull only missing images or always pull
        """
        self.specification = specification
        self.engine = engine
        self.pull_policy = pull_policy
        self.state = RunnerState.IDLE

    @property
    def name(self) -> str:
        return self.specification.name

    def run(
        self,
        timeout: float = DEFAULT_STARTUP_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        cancel_event: Optional[threading.Event] = None
    ) -> RunningContainer:
        """
        Provision the container and wait until it is ready.

        Args:
            timeout: Seconds to wait for readiness after the container starts
            poll_interval: Seconds between state inspections
            cancel_event: Optional event that aborts the readiness wait when set

        Returns:
            Handle for the running container

        Raises:
            EngineCommunicationError: If any engine call fails
            StartupTimeoutError: If the container is not ready in time
            StartupCancelledError: If cancel_event is set while waiting
        """
        if self.engine is None:
            self.engine = EngineClient.from_env()

        try:
            self._remove_existing()
            self._ensure_image()

            self.engine.create_container(self.specification)
            self.state = RunnerState.CREATED
            logger.info(f"Created container {self.name} from image {self.specification.image}")

            self.engine.start_container(self.name)
            self.state = RunnerState.STARTED

            self._wait_until_ready(timeout, poll_interval, cancel_event)
        except (StartupTimeoutError, StartupCancelledError):
            raise
        except Exception:
            self.state = RunnerState.FAILED
            raise

        self.state = RunnerState.HEALTHY
        logger.info(f"Container {self.name} is running and healthy")
        return RunningContainer(name=self.name, engine=self.engine)

    def _remove_existing(self):
        self.state = RunnerState.PREFLIGHT_CHECK
        if not has_name(self.engine.list_container_names(), self.name):
            return

        self.state = RunnerState.REMOVING
        logger.info(f"Removing existing container: {self.name}")
        self.engine.remove_container(self.name)
        logger.info(f"Removed existing container: {self.name}")

    def _ensure_image(self):
        self.state = RunnerState.IMAGE_CHECK
        image = self.specification.image
        if self.pull_policy == PullPolicy.IF_NOT_PRESENT and image in self.engine.list_image_tags():
            logger.info(f"Docker image is already pulled: {image}")
            return

        self.state = RunnerState.PULLING
        logger.info(f"Pulling docker image: {image}")
        self.engine.pull_image(image)

    def _wait_until_ready(
        self,
        timeout: float,
        poll_interval: float,
        cancel_event: Optional[threading.Event]
    ):
        self.state = RunnerState.POLLING_HEALTH
        probe_configured = self.specification.health_probe is not None
        deadline = time.monotonic() + timeout

        while True:
            container_state = self.engine.inspect_state(self.name)
            if is_ready(container_state, probe_configured):
                return
            logger.debug(
                f"Waiting for container {self.name}: "
                f"status={container_state.status}, health={container_state.health}"
            )

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self.state = RunnerState.TIMED_OUT
                logger.warning(f"Container {self.name} did not become ready within {timeout}s")
                raise StartupTimeoutError(
                    self.name, timeout, container_state.status, container_state.health
                )

            delay = min(poll_interval, remaining)
            if cancel_event is None:
                time.sleep(delay)
            elif cancel_event.wait(delay):
                self.state = RunnerState.CANCELLED
                logger.warning(f"Startup of container {self.name} was cancelled")
                raise StartupCancelledError(self.name)
