# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Script node - runs config["script"] in the safe script evaluator
"""
from typing import Optional

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.script_evaluator import ScriptError, evaluate_script, stringify_result
from nodeflow.workflow_models import Node

logger = get_service_logger("script")


class ScriptCapability(NodeCapability):
    """Evaluation errors abort the run"""

    kind = "lua-script"
    aliases = ("script",)

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        script = node.config.get("script", "")
        logger.debug(f"Evaluating script for node {node.id}")

        try:
            value = evaluate_script(script)
        except ScriptError as e:
            self.emit(result, node, sink, "script-error", data=str(e))
            raise self.fail(node, str(e))

        result.output = stringify_result(value)
        self.emit(result, node, sink, "output", data=result.output, value=result.output)
        return result
