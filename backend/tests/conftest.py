# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Shared fixtures for Nodeflow tests
"""

import os
import sys
from pathlib import Path

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from nodeflow.core.config import Config


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config with storage in a temp directory"""
    return Config(data_dir=str(tmp_path), log_format="text")
