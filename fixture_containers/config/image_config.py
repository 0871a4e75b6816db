"""
Image Configuration for fixture containers

Resolves registry-qualified image references per database kind and the
startup wait settings from environment variables, with an optional .env file
as a lower-precedence source.
"""

import logging
import os
from pathlib import Path
from typing import Dict, Optional

from fixture_containers.runner.errors import FixtureContainerError

logger = logging.getLogger(__name__)


class ConfigValidationError(FixtureContainerError):
    """Raised when configuration validation fails."""
    pass


class ImageConfig:
    """
    Image and startup configuration for fixture containers.

    Precedence for every value: os.environ, then the .env file in config_dir,
    then the built-in default.
    """

    DEFAULT_REGISTRY = 'public.ecr.aws/docker/library/'

    DEFAULT_IMAGES = {
        'postgres': 'postgres:latest',
        'mysql': 'mysql:latest'
    }

    IMAGE_ENV_VARS = {
        'postgres': 'PG_DOCKER_IMAGE',
        'mysql': 'MYSQL_DOCKER_IMAGE'
    }

    REGISTRY_ENV_VARS = {
        'postgres': 'PG_CONTAINER_REGISTRY',
        'mysql': 'MYSQL_CONTAINER_REGISTRY'
    }

    STARTUP_TIMEOUT_ENV_VAR = 'FIXTURE_STARTUP_TIMEOUT'
    POLL_INTERVAL_ENV_VAR = 'FIXTURE_POLL_INTERVAL'
    DEFAULT_STARTUP_TIMEOUT = 30.0
    DEFAULT_POLL_INTERVAL = 0.1

    def __init__(self, config_dir: Optional[str] = None):
        """
        Initialize ImageConfig.

        Args:
            config_dir: Directory containing an optional .env file
        """
        self.config_dir = Path(config_dir) if config_dir else Path.cwd()
        self._env_vars: Dict[str, str] = {}
        self._load_env_file(self.config_dir / '.env')

    def _load_env_file(self, env_path: Path):
        """Load KEY=VALUE lines from an env file, ignoring comments and blanks."""
        if not env_path.exists():
            return
        with open(env_path, 'r') as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith('#') and '=' in line:
                    key, value = line.split('=', 1)
                    self._env_vars[key.strip()] = value.strip()
        logger.debug(f"Loaded fixture configuration from {env_path}")

    def _get(self, key: str) -> Optional[str]:
        return os.getenv(key) or self._env_vars.get(key)

    def _check_kind(self, kind: str):
        if kind not in self.DEFAULT_IMAGES:
            raise ConfigValidationError(f"Unknown database kind: {kind}")

    def get_registry(self, kind: str) -> str:
        """Get the registry prefix for a database kind."""
        self._check_kind(kind)
        return self._get(self.REGISTRY_ENV_VARS[kind]) or self.DEFAULT_REGISTRY

    def get_image(self, kind: str, registry: Optional[str] = None) -> str:
        """
        Get the image reference for a database kind.

        A full image override from the environment wins over everything.
        Otherwise the default image is prefixed with the explicit registry,
        or the configured one.
        """
        self._check_kind(kind)
        image = self._get(self.IMAGE_ENV_VARS[kind])
        if image:
            return image
        prefix = registry if registry is not None else self.get_registry(kind)
        return f"{prefix}{self.DEFAULT_IMAGES[kind]}"

    def _get_positive_float(self, env_var: str, default: float) -> float:
        raw = self._get(env_var)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            raise ConfigValidationError(f"Invalid {env_var}: '{raw}' - must be a number of seconds")
        if value <= 0:
            raise ConfigValidationError(f"Invalid {env_var}: '{raw}' - must be greater than 0")
        return value

    @property
    def startup_timeout(self) -> float:
        """Seconds to wait for a fixture container to become healthy."""
        return self._get_positive_float(self.STARTUP_TIMEOUT_ENV_VAR, self.DEFAULT_STARTUP_TIMEOUT)

    @property
    def poll_interval(self) -> float:
        """Seconds between container state inspections."""
        return self._get_positive_float(self.POLL_INTERVAL_ENV_VAR, self.DEFAULT_POLL_INTERVAL)
