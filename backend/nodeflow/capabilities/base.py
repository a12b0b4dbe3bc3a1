# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Node Capability contract

Every node kind is served by one NodeCapability. A capability reads its
parameters from node.config, records LogData entries (pushed live through
the sink when one is attached) and returns its output string.

Operational problems (bad URL, missing file, query timeout) become log and
output text. Only NodeExecutionError aborts the run.
"""
from dataclasses import dataclass, field
from typing import ClassVar, List, Optional, Tuple

from nodeflow.core.errors import NodeExecutionError
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Log, LogData, Node


@dataclass
class NodeResult:
    """Logs recorded by one node plus its output text"""
    logs: List[Log] = field(default_factory=list)
    output: str = ""


class NodeCapability:
    """Base class for node kinds"""

    kind: ClassVar[str] = ""
    aliases: ClassVar[Tuple[str, ...]] = ()

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        raise NotImplementedError

    def emit(
        self,
        result: NodeResult,
        node: Node,
        sink: Optional[EventSink],
        kind: str,
        data: Optional[str] = None,
        value: Optional[str] = None,
        node_type: Optional[str] = None,
    ) -> LogData:
        """Record a log entry on the result and push it to the observer"""
        log_data = LogData(kind=kind, node_id=node.id, node_type=node_type, result=value, data=data)
        result.logs.append(Log(data=log_data))
        if sink is not None:
            sink.send_json(log_data)
        return log_data

    def fail(self, node: Node, message: str) -> NodeExecutionError:
        return NodeExecutionError(node.id, node.kind, message)
