"""Unit tests for client configuration management."""

import os
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from labinv.inventory.config import (
    DEFAULT_BASE_URL,
    ClientConfig,
    create_default_config,
    load_client_config,
)


def _missing_file() -> MagicMock:
    mock_config_file = MagicMock(spec=Path)
    mock_config_file.exists.return_value = False
    return mock_config_file


class TestLoadClientConfig:
    """Tests for load_client_config with various sources."""

    def test_defaults_without_file_or_env(self):
        with patch(
            "labinv.inventory.config.get_config_file", return_value=_missing_file()
        ):
            with patch.dict(os.environ, {}, clear=True):
                config = load_client_config()

        assert config.base_url == DEFAULT_BASE_URL
        assert config.api_token is None
        assert config.page_size == 10

    def test_loads_from_env_vars(self):
        with patch(
            "labinv.inventory.config.get_config_file", return_value=_missing_file()
        ):
            with patch.dict(
                os.environ,
                {"LABINV_API_URL": "https://lab.example/api", "LABINV_API_TOKEN": "t0k"},
                clear=True,
            ):
                config = load_client_config()

        assert config.base_url == "https://lab.example/api"
        assert config.api_token == "t0k"

    def test_loads_from_toml_file(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text(
            '[api]\nbase_url = "http://file.example/api"\npage_size = 25\n'
        )

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            with patch.dict(os.environ, {}, clear=True):
                config = load_client_config()

        assert config.base_url == "http://file.example/api"
        assert config.page_size == 25

    def test_env_var_takes_precedence_over_file(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text('[api]\nbase_url = "http://file.example/api"\n')

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            with patch.dict(
                os.environ, {"LABINV_API_URL": "http://env.example/api"}, clear=True
            ):
                config = load_client_config()

        assert config.base_url == "http://env.example/api"

    def test_malformed_file_is_ignored(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("this is [not toml")

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            with patch.dict(os.environ, {}, clear=True):
                config = load_client_config()

        assert config.base_url == DEFAULT_BASE_URL

    def test_invalid_values_raise(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[api]\npage_size = 0\n")

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            with patch.dict(os.environ, {}, clear=True):
                with pytest.raises(ValueError):
                    load_client_config()


class TestCreateDefaultConfig:
    def test_writes_loadable_file(self, tmp_path):
        config_file = tmp_path / "config.toml"

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            create_default_config()
            with patch.dict(os.environ, {}, clear=True):
                config = load_client_config()

        assert config_file.exists()
        assert config == ClientConfig()

    def test_does_not_overwrite(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[api]\npage_size = 50\n")

        with patch("labinv.inventory.config.get_config_file", return_value=config_file):
            create_default_config()

        assert config_file.read_text() == "[api]\npage_size = 50\n"
