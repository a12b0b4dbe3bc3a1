# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Dependency injection for the Nodeflow backend.

Provides FastAPI dependencies for runtime objects stored in app.state
by the application factory.
"""

from fastapi import Request

from nodeflow.capabilities import CapabilityRegistry
from nodeflow.core.config import Config


def get_current_config(request: Request) -> Config:
    """
    Get the configuration the app was created with.

    Returns:
        Config: Application configuration
    """
    return request.app.state.config


def get_capability_registry(request: Request) -> CapabilityRegistry:
    """Get the node capability registry."""
    return request.app.state.capabilities


def get_workflow_service(request: Request):
    """Get the WorkflowService initialized at startup."""
    return request.app.state.workflow_service
