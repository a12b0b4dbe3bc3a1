# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Engine - layered graph traversal with data propagation

A run walks the graph frontier by frontier:

    1. successor map from edges (source -> target, last edge wins)
    2. first frontier = nodes that no edge targets
    3. each node gets its pending input substituted into its config,
       is dispatched to its capability, and hands its output to its
       successor (last writer wins)
    4. next frontier = targets of edges leaving the processed frontier

The output of an "output" node becomes the run result. Any capability
failure reports an error event and aborts the run. Cyclic graphs are
rejected before traversal.
"""
from collections import deque
from typing import Dict, List, Optional

from nodeflow.capabilities import CapabilityRegistry
from nodeflow.core.errors import (
    CycleDetectedError,
    ExecutionError,
    NodeExecutionError,
    sanitize_error_for_user,
)
from nodeflow.core.logging import get_service_logger, log_event
from nodeflow.event_sink import EventSink
from nodeflow.execution_store import ExecutionRecorder
from nodeflow.workflow_models import Log, LogData, Node, Workflow, utc_now

logger = get_service_logger("workflow_engine")


def find_cycle(workflow: Workflow) -> List[str]:
    """
    Kahn's algorithm over the workflow graph.

    Edges with a dangling endpoint are ignored. Self-loops count as cycles.

    Returns:
        Ids of nodes that could not be ordered (empty when acyclic)
    """
    node_ids = list(dict.fromkeys(node.id for node in workflow.nodes))
    graph: Dict[str, List[str]] = {node_id: [] for node_id in node_ids}
    in_degree: Dict[str, int] = {node_id: 0 for node_id in node_ids}

    for edge in workflow.edges:
        if edge.source not in graph or edge.target not in graph:
            continue
        graph[edge.source].append(edge.target)
        in_degree[edge.target] += 1

    queue = deque([node_id for node_id in node_ids if in_degree[node_id] == 0])
    ordered = set()

    while queue:
        node_id = queue.popleft()
        ordered.add(node_id)

        for neighbor in graph[node_id]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    return [node_id for node_id in node_ids if node_id not in ordered]


class WorkflowEngine:
    """
    Executes workflows against a capability registry.

    Concurrent runs share only the execution store behind the recorder.
    """

    def __init__(self, registry: CapabilityRegistry, recorder: Optional[ExecutionRecorder] = None):
        self.registry = registry
        self.recorder = recorder

    async def run(
        self,
        workflow: Workflow,
        sink: Optional[EventSink] = None,
        record_execution: bool = False,
        seed_input: Optional[str] = None,
    ) -> str:
        """
        Execute a workflow.

        Every run ends its sink with either [DONE] or an error event,
        whatever the failure.

        Args:
            workflow: Workflow to run (never mutated)
            sink: Optional live progress channel
            record_execution: Persist an Execution record on success
            seed_input: Pending input for every first-frontier node

        Returns:
            Output of the last executed output node ("" if none)

        Raises:
            CycleDetectedError: Graph contains a cycle
            NodeExecutionError: A node failed hard; the run was aborted
        """
        workflow = workflow.model_copy(deep=True)
        logger.info(f"Starting workflow run: {workflow.id or 'unsaved'} ({workflow.name})")

        try:
            result = await self._traverse(workflow, sink, record_execution, seed_input)
        except ExecutionError as e:
            self._report_failure(sink, e)
            raise
        except Exception as e:
            logger.exception(f"Workflow run failed: {workflow.id or 'unsaved'}")
            if sink is not None:
                sink.send_error(f"Workflow execution failed: {sanitize_error_for_user(e)}")
            raise

        if sink is not None:
            sink.send_done()
        return result

    async def _traverse(
        self,
        workflow: Workflow,
        sink: Optional[EventSink],
        record_execution: bool,
        seed_input: Optional[str],
    ) -> str:
        started_at = utc_now()

        cycle = find_cycle(workflow)
        if cycle:
            raise CycleDetectedError(cycle, workflow_id=workflow.id)

        nodes: Dict[str, Node] = {}
        for node in workflow.nodes:
            nodes.setdefault(node.id, node)

        successors = {edge.source: edge.target for edge in workflow.edges}
        targets = {edge.target for edge in workflow.edges}
        frontier = list(dict.fromkeys(node.id for node in workflow.nodes if node.id not in targets))

        pending: Dict[str, str] = {}
        if seed_input is not None:
            pending = {node_id: seed_input for node_id in frontier}

        logs: List[Log] = []
        result = ""

        while True:
            executed = False

            for node_id in frontier:
                node = nodes.get(node_id)
                if node is None:
                    continue

                if node_id in pending:
                    node.apply_input(pending[node_id])

                try:
                    output = await self._execute_node(node, sink, logs)
                except ExecutionError as e:
                    logger.error(f"Workflow run aborted at node {node_id}: {e.message}")
                    raise

                if node_id in successors:
                    pending[successors[node_id]] = output
                if node.kind == "output":
                    result = output
                executed = True

            current = set(frontier)
            frontier = list(dict.fromkeys(
                edge.target for edge in workflow.edges if edge.source in current
            ))

            if not executed or not frontier:
                break

        finished_at = utc_now()
        if record_execution and self.recorder is not None:
            await self.recorder.record(workflow.id, started_at, finished_at, logs)

        duration = (finished_at - started_at).total_seconds()
        log_event(
            logger,
            f"Workflow run completed: {workflow.id or 'unsaved'} in {duration:.2f}s",
            workflow_id=workflow.id,
            node_events=len(logs),
            recorded=record_execution,
        )
        return result

    async def _execute_node(self, node: Node, sink: Optional[EventSink], logs: List[Log]) -> str:
        """Dispatch one node between node_start and node_complete events"""
        logger.debug(f"Executing node {node.id} ({node.kind})")
        self._emit(logs, sink, LogData(kind="node_start", node_id=node.id, node_type=node.kind))
        try:
            capability = self.registry.get(node)
            node_result = await capability.execute(node, sink)
            logs.extend(node_result.logs)
            return node_result.output
        except ExecutionError:
            raise
        except Exception as e:
            logger.exception(f"Unexpected failure in node {node.id} ({node.kind})")
            raise NodeExecutionError(node.id, node.kind, sanitize_error_for_user(e)) from e
        finally:
            self._emit(logs, sink, LogData(kind="node_complete", node_id=node.id, node_type=node.kind))

    @staticmethod
    def _emit(logs: List[Log], sink: Optional[EventSink], data: LogData) -> None:
        logs.append(Log(data=data))
        if sink is not None:
            sink.send_json(data)

    @staticmethod
    def _report_failure(sink: Optional[EventSink], error: ExecutionError) -> None:
        if sink is None:
            return
        if isinstance(error, NodeExecutionError):
            sink.send_error(f"Node execution failed: {error.message}")
        else:
            sink.send_error(f"Workflow execution failed: {error.message}")
