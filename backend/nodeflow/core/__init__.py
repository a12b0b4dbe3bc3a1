# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Core utilities and shared modules for the Nodeflow backend.

This package contains:
- config: Configuration management
- dependencies: Dependency injection
- errors: Custom exceptions
- logging: Structured logging
"""

from nodeflow.core.config import get_config, Config
from nodeflow.core.errors import NodeflowError, NotFoundError, ConflictError
from nodeflow.core.logging import get_logger

__all__ = [
    "get_config",
    "Config",
    "NodeflowError",
    "NotFoundError",
    "ConflictError",
    "get_logger",
]
