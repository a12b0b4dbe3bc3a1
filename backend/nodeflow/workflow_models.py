# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Workflow Models - Shared data models to prevent circular imports

Wire format uses camelCase aliases (nodeId, createdAt, ...) shared by the
HTTP API, the SSE stream and the persisted JSON collections.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


INPUT_PLACEHOLDER = "${input}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WireModel(BaseModel):
    """Base model accepting both aliases and attribute names"""
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        """JSON-ready dict using wire (alias) names"""
        return self.model_dump(mode="json", by_alias=True)


# ============================================================================
# Workflow Definition Models
# ============================================================================

class Position(WireModel):
    """Canvas position - UI only, ignored by the engine"""
    x: float = 0.0
    y: float = 0.0


class Node(WireModel):
    """Single node in a workflow"""
    id: str
    kind: str = Field(alias="type")  # "input", "output", "http-request", ...
    position: Position = Field(default_factory=Position)
    config: Dict[str, str] = Field(default_factory=dict)
    label: Optional[str] = None

    def apply_input(self, value: str) -> None:
        """Substitute the input placeholder in every config value"""
        self.config = {
            key: raw.replace(INPUT_PLACEHOLDER, value)
            for key, raw in self.config.items()
        }


class Edge(WireModel):
    """Connection between workflow nodes"""
    source: str
    target: str
    source_handle: Optional[str] = Field(default=None, alias="sourceHandle")


class Workflow(WireModel):
    """Complete workflow definition"""
    id: Optional[str] = None
    name: str
    nodes: List[Node] = Field(default_factory=list)
    edges: List[Edge] = Field(default_factory=list)
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    updated_at: Optional[datetime] = Field(default=None, alias="updatedAt")

    def has_kind(self, kind: str) -> bool:
        return any(node.kind == kind for node in self.nodes)


# ============================================================================
# Execution Models
# ============================================================================

class LogData(WireModel):
    """
    One progress entry, shared by the SSE stream and persisted logs.

    kind is node_start / node_complete / input / output / ai_response_chunk
    or a capability-scoped "<kind>-error" / "<kind>-info" tag.
    """
    kind: str = Field(alias="type")
    node_id: str = Field(alias="nodeId")
    node_type: Optional[str] = Field(default=None, alias="nodeType")
    result: Optional[str] = None
    data: Optional[str] = None


class Log(WireModel):
    """Timestamped LogData entry"""
    timestamp: datetime = Field(default_factory=utc_now)
    data: LogData


class Execution(WireModel):
    """Immutable record of one completed run"""
    id: str
    workflow_id: str = Field(alias="workflowId")
    input: Dict[str, str] = Field(default_factory=dict)
    logs: List[Log] = Field(default_factory=list)
    duration: int  # milliseconds
    status: str  # "completed"
    timestamp: datetime
