# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Input, Output and Condition nodes
"""
from typing import Optional

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.condition_evaluator import evaluate_condition
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Node


class InputCapability(NodeCapability):
    """Emits its configured value (usually the seed input)"""

    kind = "input"

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        value = node.config.get("input")
        self.emit(result, node, sink, "input", data=value)
        result.output = value or ""
        return result


class OutputCapability(NodeCapability):
    """Terminal node; its output becomes the run result"""

    kind = "output"

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        value = node.config.get("output")
        self.emit(result, node, sink, "output", data=value)
        result.output = value or ""
        return result


class ConditionCapability(NodeCapability):
    """Evaluates config["condition"] to "true" / "false" """

    kind = "condition"

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        condition = node.config.get("condition", "")
        self.emit(result, node, sink, "input", data=condition, node_type=self.kind)

        result.output = "true" if evaluate_condition(condition) else "false"
        self.emit(result, node, sink, "output", data=result.output, node_type=self.kind)
        return result
