# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node capabilities - one executable behaviour per node kind tag.

    input         InputCapability
    output        OutputCapability
    condition     ConditionCapability
    http-request  HttpRequestCapability
    lua-script    ScriptCapability (alias: script)
    postgresql    DatabaseQueryCapability
    read-file     ReadFileCapability
    write-file    WriteFileCapability
    ai-model      ModelInferenceCapability
"""
from typing import Dict, Iterable, List

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.capabilities.basic import ConditionCapability, InputCapability, OutputCapability
from nodeflow.capabilities.database import DatabaseQueryCapability
from nodeflow.capabilities.files import ReadFileCapability, WriteFileCapability
from nodeflow.capabilities.http_request import HttpRequestCapability
from nodeflow.capabilities.model_inference import ModelInferenceCapability
from nodeflow.capabilities.script import ScriptCapability
from nodeflow.core.config import Config
from nodeflow.core.errors import UnknownNodeKindError
from nodeflow.workflow_models import Node


class CapabilityRegistry:
    """Kind tag -> capability lookup"""

    def __init__(self, capabilities: Iterable[NodeCapability] = ()):
        self._capabilities: Dict[str, NodeCapability] = {}
        for capability in capabilities:
            self.register(capability)

    def register(self, capability: NodeCapability) -> None:
        for kind in (capability.kind, *capability.aliases):
            self._capabilities[kind] = capability

    def get(self, node: Node) -> NodeCapability:
        """
        Raises:
            UnknownNodeKindError: No capability handles node.kind
        """
        capability = self._capabilities.get(node.kind)
        if capability is None:
            raise UnknownNodeKindError(node.id, node.kind)
        return capability

    def kinds(self) -> List[str]:
        return sorted(self._capabilities)


def build_capability_registry(config: Config) -> CapabilityRegistry:
    """Registry with every built-in node kind, configured from config"""
    return CapabilityRegistry([
        InputCapability(),
        OutputCapability(),
        ConditionCapability(),
        HttpRequestCapability(timeout=config.http_timeout),
        ScriptCapability(),
        DatabaseQueryCapability(
            connect_timeout=config.database_connect_timeout,
            query_timeout=config.database_query_timeout,
        ),
        ReadFileCapability(),
        WriteFileCapability(),
        ModelInferenceCapability(
            base_url=config.model_base_url,
            model=config.model_name,
            prompt=config.model_prompt,
            api_key=config.get_model_api_key(),
        ),
    ])


__all__ = [
    "CapabilityRegistry",
    "NodeCapability",
    "NodeResult",
    "build_capability_registry",
    "InputCapability",
    "OutputCapability",
    "ConditionCapability",
    "HttpRequestCapability",
    "ScriptCapability",
    "DatabaseQueryCapability",
    "ReadFileCapability",
    "WriteFileCapability",
    "ModelInferenceCapability",
]
