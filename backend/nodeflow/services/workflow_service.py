# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Service - Manages workflow definitions and execution.

Single responsibility: Workflow CRUD operations and execution orchestration
between the HTTP layer, the stores and the engine.
"""

import asyncio
from typing import List, Optional, Set

from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.execution_store import ExecutionStore
from nodeflow.workflow_engine import WorkflowEngine
from nodeflow.workflow_models import Execution, Workflow
from nodeflow.workflow_store import WorkflowStore

logger = get_service_logger("workflow")


class WorkflowService:
    """
    Manages workflow definitions and runs.

    Responsibilities:
    - CRUD via WorkflowStore
    - Execution history via ExecutionStore
    - Buffered runs (await the result)
    - Streaming runs (background task feeding an EventSink)
    """

    def __init__(
        self,
        workflow_store: WorkflowStore,
        execution_store: ExecutionStore,
        engine: WorkflowEngine,
    ):
        self.workflows = workflow_store
        self.executions = execution_store
        self.engine = engine
        self._tasks: Set[asyncio.Task] = set()

    async def initialize(self) -> None:
        await self.workflows.initialize()
        await self.executions.initialize()
        logger.info("WorkflowService initialized")

    async def list_workflows(self) -> List[Workflow]:
        return await self.workflows.list()

    async def get_workflow(self, workflow_id: str) -> Workflow:
        return await self.workflows.get(workflow_id)

    async def save_workflow(self, workflow: Workflow) -> Workflow:
        return await self.workflows.save(workflow)

    async def delete_workflow(self, workflow_id: str) -> None:
        await self.workflows.delete(workflow_id)

    async def get_history(self, workflow_id: str) -> List[Execution]:
        return await self.executions.list_for_workflow(workflow_id)

    async def run_buffered(self, workflow: Workflow, seed_input: Optional[str] = None) -> str:
        """
        Run a workflow to completion and record it.

        Raises:
            ExecutionError: Run aborted
        """
        return await self.engine.run(workflow, record_execution=True, seed_input=seed_input)

    def start_stream(
        self,
        workflow: Workflow,
        record_execution: bool = False,
        seed_input: Optional[str] = None,
    ) -> EventSink:
        """
        Start a run in the background and return its event sink.

        The run is not cancelled when the consumer disconnects.
        """
        sink = EventSink()
        task = asyncio.create_task(
            self.engine.run(workflow, sink=sink, record_execution=record_execution, seed_input=seed_input)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_run_finished)
        return sink

    def _on_run_finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.warning(f"Streaming run failed: {error}")

    @property
    def active_runs(self) -> int:
        return len(self._tasks)

    async def shutdown(self) -> None:
        """Wait for in-flight streaming runs"""
        if self._tasks:
            logger.info(f"Waiting for {len(self._tasks)} in-flight runs")
            await asyncio.gather(*self._tasks, return_exceptions=True)
