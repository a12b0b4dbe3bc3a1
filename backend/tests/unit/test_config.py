# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for YAML configuration loading
"""

from pathlib import Path

import yaml

from nodeflow.core import config as config_module
from nodeflow.core.config import Config, load_config, reload_config


class TestLoadConfig:
    """YAML parsing and defaults"""

    def test_missing_file_gives_defaults(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)

        config = load_config(str(tmp_path / "absent.yaml"))

        assert config == Config()
        assert config.service_port == 3000
        assert config.api_prefix == "/api"
        assert config.workflows_path == Path(".") / "workflows.json"

    def test_values_from_yaml(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        path = tmp_path / "nodeflow.yaml"
        path.write_text(yaml.safe_dump({
            "service": {"port": 8080, "api_prefix": "/v1"},
            "storage": {"data_dir": str(tmp_path)},
            "nodes": {"postgresql": {"query_timeout": 5}, "ai_model": {"model": "small"}},
            "logging": {"level": "DEBUG", "format": "text"},
        }))

        config = load_config(str(path))

        assert config.service_port == 8080
        assert config.api_prefix == "/v1"
        assert config.executions_path == tmp_path / "executions.json"
        assert config.database_query_timeout == 5
        assert config.model_name == "small"
        assert config.model_base_url == Config().model_base_url
        assert config.log_level == "DEBUG"

    def test_empty_api_prefix_mounts_at_root(self, tmp_path, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        path = tmp_path / "nodeflow.yaml"
        path.write_text(yaml.safe_dump({"service": {"api_prefix": ""}}))

        assert load_config(str(path)).api_prefix == ""

    def test_log_level_env_override(self, tmp_path, monkeypatch):
        path = tmp_path / "nodeflow.yaml"
        path.write_text(yaml.safe_dump({"logging": {"level": "DEBUG"}}))
        monkeypatch.setenv("LOG_LEVEL", "WARNING")

        assert load_config(str(path)).log_level == "WARNING"


class TestSecrets:
    """API key resolution"""

    def test_model_api_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        assert Config().get_model_api_key() == "sk-test"

    def test_model_api_key_placeholder(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        assert Config().get_model_api_key() == "None"


class TestGlobalConfig:
    """Process-wide instance"""

    def test_reload_reads_config_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text(yaml.safe_dump({"service": {"port": 9999}}))
        monkeypatch.setenv("NODEFLOW_CONFIG_PATH", str(path))
        monkeypatch.setattr(config_module, "_config", None)

        assert reload_config().service_port == 9999
