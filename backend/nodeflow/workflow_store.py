# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Store - CRUD persistence for workflow graphs

Write-through JSON collection; the newest (or most recently updated)
workflow sits at the end of the stored list.
"""
import uuid
from pathlib import Path
from typing import List

from nodeflow.core.errors import ConflictError, NotFoundError
from nodeflow.core.logging import get_service_logger
from nodeflow.json_store import JsonCollectionStore
from nodeflow.workflow_models import Workflow, utc_now

logger = get_service_logger("workflow_store")


class WorkflowStore:
    """
    Store and query workflow definitions.

    Responsibilities:
    - Create-or-update (server assigns id and timestamps)
    - Delete / get by id
    - List newest-first
    """

    def __init__(self, path: Path):
        self._collection: JsonCollectionStore[Workflow] = JsonCollectionStore(path, Workflow)

    async def initialize(self) -> None:
        await self._collection.initialize()

    async def save(self, workflow: Workflow) -> Workflow:
        """
        Create a workflow (no id) or replace an existing one (id present).

        Args:
            workflow: Workflow definition from the client

        Returns:
            The stored workflow

        Raises:
            NotFoundError: id given but no such workflow
            ConflictError: generated id already taken
        """
        if workflow.id is not None:
            return await self._update(workflow)
        return await self._create(workflow)

    async def _create(self, workflow: Workflow) -> Workflow:
        workflow = workflow.model_copy(deep=True)
        workflow.id = str(uuid.uuid4())
        workflow.created_at = utc_now()
        workflow.updated_at = workflow.created_at

        async with self._collection.writing() as items:
            if any(w.id == workflow.id for w in items):
                raise ConflictError(f"Workflow already exists: id={workflow.id}", resource="Workflow")
            items.append(workflow)

        logger.info(f"Created workflow {workflow.id} ({workflow.name})")
        return workflow.model_copy(deep=True)

    async def _update(self, workflow: Workflow) -> Workflow:
        workflow = workflow.model_copy(deep=True)
        workflow.updated_at = utc_now()

        async with self._collection.writing() as items:
            index = self._index_of(items, workflow.id)
            if index is None:
                raise NotFoundError("Workflow", workflow.id)
            existing = items.pop(index)
            if workflow.created_at is None:
                workflow.created_at = existing.created_at
            items.append(workflow)

        logger.info(f"Updated workflow {workflow.id} ({workflow.name})")
        return workflow.model_copy(deep=True)

    async def delete(self, workflow_id: str) -> None:
        async with self._collection.writing() as items:
            index = self._index_of(items, workflow_id)
            if index is None:
                raise NotFoundError("Workflow", workflow_id)
            items.pop(index)

        logger.info(f"Deleted workflow {workflow_id}")

    async def get(self, workflow_id: str) -> Workflow:
        """
        Get a workflow snapshot by id.

        The copy is detached from the store so a run never holds the lock.

        Raises:
            NotFoundError: If workflow not found
        """
        async with self._collection.reading() as items:
            index = self._index_of(items, workflow_id)
            if index is None:
                raise NotFoundError("Workflow", workflow_id)
            return items[index].model_copy(deep=True)

    async def list(self) -> List[Workflow]:
        """All workflows, most recently created/updated first"""
        async with self._collection.reading() as items:
            return [w.model_copy(deep=True) for w in reversed(items)]

    @staticmethod
    def _index_of(items: List[Workflow], workflow_id: str):
        for index, workflow in enumerate(items):
            if workflow.id == workflow_id:
                return index
        return None
