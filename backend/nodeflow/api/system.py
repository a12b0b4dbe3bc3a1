# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
System API - liveness and build information

Endpoints:
- GET /health - Liveness probe
- GET /system/version - Running version and registered node kinds
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends

from nodeflow import __version__
from nodeflow.capabilities import CapabilityRegistry
from nodeflow.core.config import Config
from nodeflow.core.dependencies import get_capability_registry, get_current_config

router = APIRouter(tags=["system"])


@router.get("/health")
async def health() -> Dict[str, str]:
    """Liveness probe"""
    return {"status": "ok"}


@router.get("/system/version")
async def get_version(
    registry: CapabilityRegistry = Depends(get_capability_registry),
    config: Config = Depends(get_current_config)
) -> Dict[str, Any]:
    """Current version and the node kinds this server can execute"""
    return {
        "version": __version__,
        "api_prefix": config.api_prefix,
        "node_kinds": registry.kinds(),
    }
