# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow API Routes

Handles workflow management and execution:
- CRUD operations for workflow definitions
- Workflow execution (SSE streaming and buffered)
- Execution history
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import PlainTextResponse, StreamingResponse

from nodeflow.core.dependencies import get_workflow_service
from nodeflow.core.errors import ConflictError, ExecutionError, NotFoundError
from nodeflow.event_sink import SSE_HEADERS, EventSink
from nodeflow.services.workflow_service import WorkflowService
from nodeflow.workflow_models import Execution, Workflow

router = APIRouter(tags=["workflows"])


def event_stream(sink: EventSink) -> StreamingResponse:
    return StreamingResponse(sink.frames(), media_type="text/event-stream", headers=SSE_HEADERS)


# Workflow CRUD Routes
@router.get("/workflows", response_model=List[Workflow])
async def list_workflows(
    service: WorkflowService = Depends(get_workflow_service)
) -> List[Workflow]:
    """List all saved workflows, newest first"""
    return await service.list_workflows()


@router.post("/workflow", response_model=Workflow)
async def save_workflow(
    workflow: Workflow,
    service: WorkflowService = Depends(get_workflow_service)
) -> Workflow:
    """Create (no id) or update (id present) a workflow"""
    try:
        return await service.save_workflow(workflow)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))


# Execution Routes
@router.post("/workflow/run")
async def run_unsaved_workflow(
    workflow: Workflow,
    service: WorkflowService = Depends(get_workflow_service)
) -> StreamingResponse:
    """Stream a run of an unsaved workflow; not recorded in history"""
    sink = service.start_stream(workflow, record_execution=False)
    return event_stream(sink)


@router.get("/workflow/{workflow_id}", response_model=Workflow)
async def get_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Workflow:
    """Get a specific workflow"""
    try:
        return await service.get_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/workflow/{workflow_id}", status_code=204)
async def delete_workflow(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> Response:
    """Delete a workflow"""
    try:
        await service.delete_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return Response(status_code=204)


@router.get("/workflow/{workflow_id}/run")
async def run_workflow(
    workflow_id: str,
    input: Optional[str] = None,
    service: WorkflowService = Depends(get_workflow_service)
) -> Response:
    """
    Run a saved workflow and record it.

    Workflows with an output node answer with the buffered output text;
    all others stream their progress as SSE.
    """
    try:
        workflow = await service.get_workflow(workflow_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if workflow.has_kind("output"):
        try:
            output = await service.run_buffered(workflow, seed_input=input)
        except ExecutionError as e:
            raise HTTPException(status_code=500, detail=e.message)
        return PlainTextResponse(output)

    sink = service.start_stream(workflow, record_execution=True, seed_input=input)
    return event_stream(sink)


@router.get("/workflow/{workflow_id}/history", response_model=List[Execution])
async def get_workflow_history(
    workflow_id: str,
    service: WorkflowService = Depends(get_workflow_service)
) -> List[Execution]:
    """Execution history of a workflow, newest first"""
    return await service.get_history(workflow_id)
