# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Execution Store - Persistent storage for workflow execution history

Append-only: records are never mutated or deleted here.
"""
import uuid
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from nodeflow.core.logging import get_service_logger
from nodeflow.json_store import JsonCollectionStore
from nodeflow.workflow_models import Execution, Log

logger = get_service_logger("execution_store")


class ExecutionStore:
    """
    Store and query workflow execution history.

    Each execution record contains:
        - id / workflowId
        - input (always empty)
        - logs (every engine and capability LogData of the run)
        - duration (ms), status, timestamp (run start)
    """

    def __init__(self, path: Path):
        self._collection: JsonCollectionStore[Execution] = JsonCollectionStore(path, Execution)

    async def initialize(self) -> None:
        await self._collection.initialize()

    async def create(self, execution: Execution) -> Execution:
        async with self._collection.writing() as items:
            items.append(execution)
        logger.info(f"Recorded execution {execution.id} for workflow {execution.workflow_id}")
        return execution

    async def list_for_workflow(self, workflow_id: str) -> List[Execution]:
        """
        Get execution history for a specific workflow.

        Args:
            workflow_id: Workflow to query

        Returns:
            Matching executions, most recent first
        """
        async with self._collection.reading() as items:
            return [
                e.model_copy(deep=True)
                for e in reversed(items)
                if e.workflow_id == workflow_id
            ]


class ExecutionRecorder:
    """Wraps a finished run into an Execution record and persists it"""

    def __init__(self, store: ExecutionStore):
        self.store = store

    async def record(
        self,
        workflow_id: Optional[str],
        started_at: datetime,
        finished_at: datetime,
        logs: List[Log],
        status: str = "completed",
    ) -> Execution:
        duration_ms = int((finished_at - started_at).total_seconds() * 1000)
        execution = Execution(
            id=str(uuid.uuid4()),
            workflow_id=workflow_id or "unknown",
            input={},
            logs=list(logs),
            duration=max(duration_ms, 0),
            status=status,
            timestamp=started_at,
        )
        return await self.store.create(execution)
