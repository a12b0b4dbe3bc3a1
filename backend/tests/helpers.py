# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Builders and fakes shared by tests
"""

import json
from typing import List

from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Edge, Node, Workflow


def make_node(node_id: str, kind: str, **config: str) -> Node:
    return Node(id=node_id, kind=kind, config=config)


def make_workflow(nodes, edges=(), name: str = "test", workflow_id=None) -> Workflow:
    return Workflow(
        id=workflow_id,
        name=name,
        nodes=list(nodes),
        edges=[Edge(source=s, target=t) for s, t in edges],
    )


def drain(sink: EventSink) -> List[str]:
    """Frames already queued on a sink (non-blocking)"""
    frames = []
    while not sink._queue.empty():
        frame, _ = sink._queue.get_nowait()
        frames.append(frame)
    return frames


def parse_frames(body: str) -> List[dict]:
    """
    Split an SSE body into events.

    Returns dicts with "event" (None for default) and "data"; JSON data is decoded.
    """
    events = []
    for block in body.split("\n\n"):
        if not block.strip():
            continue
        event, data_lines = None, []
        for line in block.split("\n"):
            if line.startswith("event: "):
                event = line[len("event: "):]
            elif line.startswith("data: "):
                data_lines.append(line[len("data: "):])
        data = "\n".join(data_lines)
        if event is None and data.startswith("{"):
            data = json.loads(data)
        events.append({"event": event, "data": data})
    return events
