# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
HTTP Request node

Config:
    url      - required
    method   - default GET
    headers  - newline-separated "Name: Value" lines
    body     - raw request body

Transport errors and HTTP error statuses are returned as "error: ..." text.
A malformed method or header aborts the run.
"""
import re
from typing import Dict, Optional

import httpx

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Node

logger = get_service_logger("http_request")

METHOD_PATTERN = re.compile(r"^[A-Za-z]+$")


def parse_headers(raw: str) -> Dict[str, str]:
    """Parse "Name: Value" lines; lines without a colon are ignored"""
    headers = {}
    for line in raw.strip().splitlines():
        if ":" not in line:
            continue
        name, value = line.split(":", 1)
        headers[name.strip()] = value.strip()
    return headers


class HttpRequestCapability(NodeCapability):
    """Issues one HTTP request per execution"""

    kind = "http-request"

    def __init__(self, timeout: float = 30.0, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.transport = transport

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        url = node.config.get("url")
        if url is None:
            self.emit(result, node, sink, "http-request-error", data="url is empty")
            return result

        method = node.config.get("method", "GET").strip() or "GET"
        if not METHOD_PATTERN.match(method):
            raise self.fail(node, f"invalid HTTP method: {method!r}")

        body = node.config.get("body", "")

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                request = client.build_request(
                    method.upper(),
                    url,
                    headers=parse_headers(node.config.get("headers", "")),
                    content=body.encode("utf-8") if body else None,
                )
            except httpx.InvalidURL as e:
                return self._error_output(result, node, sink, str(e))
            except (ValueError, TypeError) as e:
                raise self.fail(node, f"invalid request: {e}")

            try:
                response = await client.send(request)
            except httpx.HTTPError as e:
                logger.warning(f"HTTP {method} {url} failed: {e}")
                return self._error_output(result, node, sink, str(e) or type(e).__name__)

        text = response.text
        if response.status_code >= 400:
            return self._error_output(result, node, sink, f"HTTP {response.status_code}: {text}")

        self.emit(result, node, sink, "output", data=text, value=text)
        result.output = text
        return result

    def _error_output(self, result: NodeResult, node: Node, sink: Optional[EventSink], message: str) -> NodeResult:
        result.output = f"error: {message}"
        self.emit(result, node, sink, "output", data=result.output)
        return result
