# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
File nodes - read and write local text files with aiofiles
"""
from pathlib import Path
from typing import Optional

import aiofiles
import aiofiles.os

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Node

logger = get_service_logger("files")

WRITE_SUCCESS = "File written successfully"


class ReadFileCapability(NodeCapability):
    """Output is the file content, or "error: ..." on I/O failure"""

    kind = "read-file"

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        path = node.config.get("path")
        if path is None:
            self.emit(result, node, sink, "read-file-error", data="path is empty")
            return result

        try:
            async with aiofiles.open(path, "r", encoding="utf-8") as f:
                content = await f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to read {path}: {e}")
            self.emit(result, node, sink, "output", data=f"error: {e}")
            result.output = f"error: {e}"
            return result

        self.emit(result, node, sink, "output", data=content, value=content)
        result.output = content
        return result


class WriteFileCapability(NodeCapability):
    """Writes config["content"] to config["path"]; output is always empty"""

    kind = "write-file"

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        path = node.config.get("path")
        content = node.config.get("content")
        if path is None or content is None:
            self.emit(result, node, sink, "write-file-error", data="path or content is empty")
            return result

        try:
            await aiofiles.os.makedirs(Path(path).parent, exist_ok=True)
            async with aiofiles.open(path, "w", encoding="utf-8") as f:
                await f.write(content)
        except OSError as e:
            logger.warning(f"Failed to write {path}: {e}")
            self.emit(result, node, sink, "output", data=f"error: {e}")
            return result

        self.emit(result, node, sink, "output", data=WRITE_SUCCESS, value=WRITE_SUCCESS)
        return result
