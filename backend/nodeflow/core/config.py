# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Nodeflow Configuration - Single source of truth.
YAML is king. Env vars ONLY for secrets (plus LOG_LEVEL).

- ALL configuration in plain text (YAML)
- NO hidden state - everything inspectable via `cat`, `grep`
"""

import os
import yaml
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, List


DEFAULT_CONFIG_PATH = "configs/nodeflow.yaml"


# =============================================================================
# CONFIGURATION DATACLASS
# =============================================================================

@dataclass(frozen=True)
class Config:
    """
    Immutable application configuration.
    All values from YAML. No hidden state.
    """

    # -- Service --
    service_host: str = "0.0.0.0"
    service_port: int = 3000
    api_prefix: str = "/api"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])

    # -- Storage --
    data_dir: str = "."
    workflows_file: str = "workflows.json"
    executions_file: str = "executions.json"

    # -- Node capabilities --
    http_timeout: float = 30.0
    database_connect_timeout: int = 10
    database_query_timeout: float = 30.0
    model_base_url: str = "http://localhost:11434/v1"
    model_name: str = "qwen3:14b"
    model_prompt: str = "Hello"
    model_api_key: Optional[str] = None

    # -- Logging --
    log_level: str = "INFO"
    log_format: str = "json"

    # -- Derived paths --
    @property
    def workflows_path(self) -> Path:
        return Path(self.data_dir) / self.workflows_file

    @property
    def executions_path(self) -> Path:
        return Path(self.data_dir) / self.executions_file

    def get_model_api_key(self) -> str:
        """Model API key; the OpenAI-compatible client needs a non-empty value"""
        return self.model_api_key or get_openai_api_key() or "None"


# =============================================================================
# SECRETS - The ONLY thing from environment variables
# =============================================================================

def get_openai_api_key() -> Optional[str]:
    """API keys cannot be in version control."""
    return os.getenv("OPENAI_API_KEY")


# =============================================================================
# LOADER
# =============================================================================

def load_config(path: str = DEFAULT_CONFIG_PATH) -> Config:
    """
    Load configuration from YAML.
    Returns defaults if file doesn't exist.
    """
    if not Path(path).exists():
        print(f"Config not found at {path}, using defaults")
        return Config(log_level=os.getenv("LOG_LEVEL", "INFO"))

    with open(path) as f:
        y = yaml.safe_load(f) or {}

    # Helper to safely navigate nested dicts
    def get(d: dict, *keys, default=None):
        for k in keys:
            if not isinstance(d, dict):
                return default
            d = d.get(k, {})
        return d if d != {} else default

    defaults = Config()
    api_prefix = get(y, "service", "api_prefix")

    return Config(
        # Service
        service_host=get(y, "service", "host") or defaults.service_host,
        service_port=get(y, "service", "port") or defaults.service_port,
        api_prefix=defaults.api_prefix if api_prefix is None else api_prefix,
        cors_origins=get(y, "service", "cors_origins") or ["*"],

        # Storage
        data_dir=get(y, "storage", "data_dir") or defaults.data_dir,
        workflows_file=get(y, "storage", "workflows_file") or defaults.workflows_file,
        executions_file=get(y, "storage", "executions_file") or defaults.executions_file,

        # Node capabilities
        http_timeout=get(y, "nodes", "http", "timeout") or defaults.http_timeout,
        database_connect_timeout=get(y, "nodes", "postgresql", "connect_timeout") or defaults.database_connect_timeout,
        database_query_timeout=get(y, "nodes", "postgresql", "query_timeout") or defaults.database_query_timeout,
        model_base_url=get(y, "nodes", "ai_model", "base_url") or defaults.model_base_url,
        model_name=get(y, "nodes", "ai_model", "model") or defaults.model_name,
        model_prompt=get(y, "nodes", "ai_model", "prompt") or defaults.model_prompt,

        # Logging
        log_level=os.getenv("LOG_LEVEL") or get(y, "logging", "level") or defaults.log_level,
        log_format=get(y, "logging", "format") or defaults.log_format,
    )


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================

_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create global config instance."""
    global _config
    if _config is None:
        config_path = os.getenv("NODEFLOW_CONFIG_PATH", DEFAULT_CONFIG_PATH)
        _config = load_config(config_path)
    return _config


def reload_config() -> Config:
    """Force reload configuration."""
    global _config
    _config = None
    return get_config()
