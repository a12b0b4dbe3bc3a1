# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
AI Model node - streams a chat completion from an OpenAI-compatible endpoint

Config (defaults from nodes.ai_model in the YAML config):
    baseUrl, apiKey, model, prompt

Each streamed delta is pushed to the observer as an "ai_response_chunk"
event as soon as it arrives. The output is the concatenated deltas.
"""
from typing import Callable, Optional

from openai import AsyncOpenAI, OpenAIError

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Node

logger = get_service_logger("model_inference")

CHUNK_EVENT = "ai_response_chunk"


def default_client_factory(base_url: str, api_key: str) -> AsyncOpenAI:
    return AsyncOpenAI(base_url=base_url, api_key=api_key)


class ModelInferenceCapability(NodeCapability):
    """Streams model output; API failures keep whatever text already arrived"""

    kind = "ai-model"

    def __init__(
        self,
        base_url: str,
        model: str,
        prompt: str,
        api_key: str = "None",
        client_factory: Optional[Callable] = None,
    ):
        self.base_url = base_url
        self.model = model
        self.prompt = prompt
        self.api_key = api_key
        self.client_factory = client_factory or default_client_factory

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()
        base_url = node.config.get("baseUrl", self.base_url)
        api_key = node.config.get("apiKey", self.api_key)
        model = node.config.get("model", self.model)
        prompt = node.config.get("prompt", self.prompt)

        logger.info(f"Executing model node {node.id} with model={model} base_url={base_url}")
        self.emit(result, node, sink, CHUNK_EVENT, data=f"Input: {prompt}\n\nOutput:")

        chunks = []
        try:
            client = self.client_factory(base_url, api_key)
            stream = await client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                stream=True,
            )
            async for chunk in stream:
                for choice in chunk.choices:
                    content = choice.delta.content
                    self.emit(result, node, sink, CHUNK_EVENT, data=content)
                    if content:
                        chunks.append(content)
        except OpenAIError as e:
            logger.warning(f"Model stream for node {node.id} failed: {e}")
            self.emit(result, node, sink, "ai-model-error", data=str(e))

        result.output = "".join(chunks)
        return result
