"""
Unit tests for fixture image and startup configuration.
"""

import os
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest

from fixture_containers.config.image_config import ConfigValidationError, ImageConfig


@pytest.fixture
def empty_dir():
    with tempfile.TemporaryDirectory() as tmp:
        yield tmp


class TestImageResolution:
    """Test image and registry resolution per database kind"""

    def test_defaults_use_public_registry(self, empty_dir):
        with patch.dict(os.environ, {}, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('postgres') == 'public.ecr.aws/docker/library/postgres:latest'
            assert config.get_image('mysql') == 'public.ecr.aws/docker/library/mysql:latest'

    def test_registry_env_var_prefixes_default_image(self, empty_dir):
        env_vars = {'PG_CONTAINER_REGISTRY': 'registry.local/'}

        with patch.dict(os.environ, env_vars, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('postgres') == 'registry.local/postgres:latest'
            assert config.get_image('mysql') == 'public.ecr.aws/docker/library/mysql:latest'

    def test_explicit_registry_overrides_env_registry(self, empty_dir):
        env_vars = {'MYSQL_CONTAINER_REGISTRY': 'registry.local/'}

        with patch.dict(os.environ, env_vars, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('mysql', registry='') == 'mysql:latest'
            assert config.get_image('mysql', registry='mirror.io/') == 'mirror.io/mysql:latest'

    def test_image_env_var_wins_over_registry(self, empty_dir):
        env_vars = {
            'PG_DOCKER_IMAGE': 'postgres:16-alpine',
            'PG_CONTAINER_REGISTRY': 'registry.local/'
        }

        with patch.dict(os.environ, env_vars, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('postgres') == 'postgres:16-alpine'
            assert config.get_image('postgres', registry='mirror.io/') == 'postgres:16-alpine'

    def test_unknown_kind_raises_validation_error(self, empty_dir):
        config = ImageConfig(config_dir=empty_dir)

        with pytest.raises(ConfigValidationError) as exc_info:
            config.get_image('oracle')

        assert "Unknown database kind" in str(exc_info.value)


class TestEnvFileLoading:
    """Test .env file fallback"""

    def test_env_file_values_are_used(self, empty_dir):
        Path(empty_dir, '.env').write_text(
            "# fixture settings\n"
            "PG_DOCKER_IMAGE=postgres:15\n"
            "\n"
            "FIXTURE_STARTUP_TIMEOUT=45\n"
        )

        with patch.dict(os.environ, {}, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('postgres') == 'postgres:15'
            assert config.startup_timeout == 45.0

    def test_environment_takes_precedence_over_env_file(self, empty_dir):
        Path(empty_dir, '.env').write_text("PG_DOCKER_IMAGE=postgres:15\n")

        with patch.dict(os.environ, {'PG_DOCKER_IMAGE': 'postgres:17'}, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.get_image('postgres') == 'postgres:17'


class TestStartupSettings:
    """Test startup timeout and poll interval settings"""

    def test_defaults(self, empty_dir):
        with patch.dict(os.environ, {}, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.startup_timeout == 30.0
            assert config.poll_interval == 0.1

    def test_values_from_environment(self, empty_dir):
        env_vars = {'FIXTURE_STARTUP_TIMEOUT': '2.5', 'FIXTURE_POLL_INTERVAL': '0.02'}

        with patch.dict(os.environ, env_vars, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            assert config.startup_timeout == 2.5
            assert config.poll_interval == 0.02

    @pytest.mark.parametrize("value", ['soon', '0', '-5'])
    def test_invalid_timeout_raises_validation_error(self, empty_dir, value):
        with patch.dict(os.environ, {'FIXTURE_STARTUP_TIMEOUT': value}, clear=True):
            config = ImageConfig(config_dir=empty_dir)

            with pytest.raises(ConfigValidationError) as exc_info:
                config.startup_timeout

            assert "FIXTURE_STARTUP_TIMEOUT" in str(exc_info.value)
