# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
JSON Collection Store - whole-collection write-through persistence

The full collection lives in memory and is rewritten to a single JSON
document on every mutation. Readers run concurrently; writers are exclusive
and hold the lock while the document is saved.
"""
import asyncio
import json
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Generic, List, Type, TypeVar

import aiofiles
import aiofiles.os
from pydantic import BaseModel

from nodeflow.core.errors import NodeflowError
from nodeflow.core.logging import get_service_logger

logger = get_service_logger("store")

T = TypeVar("T", bound=BaseModel)


class ReadWriteLock:
    """
    asyncio readers-writer lock.

    Any number of readers, or a single writer. A waiting writer blocks new
    readers so writes are not starved.
    """

    def __init__(self):
        self._cond = asyncio.Condition()
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @asynccontextmanager
    async def read(self) -> AsyncIterator[None]:
        async with self._cond:
            await self._cond.wait_for(lambda: not self._writer and self._writers_waiting == 0)
            self._readers += 1
        try:
            yield
        finally:
            async with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @asynccontextmanager
    async def write(self) -> AsyncIterator[None]:
        async with self._cond:
            self._writers_waiting += 1
            try:
                await self._cond.wait_for(lambda: not self._writer and self._readers == 0)
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            async with self._cond:
                self._writer = False
                self._cond.notify_all()


class JsonCollectionStore(Generic[T]):
    """
    In-memory list of pydantic models backed by one JSON file.

    Storage structure:
        {data_dir}/
        └── {collection}.json   # JSON array, pretty-printed, wire names
    """

    def __init__(self, path: Path, model: Type[T]):
        self.path = Path(path)
        self.model = model
        self.lock = ReadWriteLock()
        self._items: List[T] = []
        self._loaded = False
        self._load_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """Load the collection from disk, or start empty if the file is missing"""
        async with self._load_lock:
            if self._loaded:
                return

            if await aiofiles.os.path.exists(self.path):
                async with aiofiles.open(self.path, "r") as f:
                    raw = await f.read()
                try:
                    documents = json.loads(raw) if raw.strip() else []
                    self._items = [self.model.model_validate(doc) for doc in documents]
                except ValueError as e:
                    raise NodeflowError(
                        f"Corrupt collection file {self.path}: {e}",
                        details={"path": str(self.path)}
                    )
            else:
                self._items = []

            self._loaded = True
            logger.info(f"Loaded {len(self._items)} records from {self.path}")

    async def _ensure_loaded(self) -> None:
        if not self._loaded:
            await self.initialize()

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[List[T]]:
        """Shared access to the in-memory collection"""
        await self._ensure_loaded()
        async with self.lock.read():
            yield self._items

    @asynccontextmanager
    async def writing(self) -> AsyncIterator[List[T]]:
        """
        Exclusive access to the in-memory collection.

        The whole collection is saved when the block exits without error.
        """
        await self._ensure_loaded()
        async with self.lock.write():
            yield self._items
            await self._save()

    async def _save(self) -> None:
        await aiofiles.os.makedirs(self.path.parent, exist_ok=True)
        payload = json.dumps([item.model_dump(mode="json", by_alias=True) for item in self._items], indent=2)
        async with aiofiles.open(self.path, "w") as f:
            await f.write(payload)
        logger.debug(f"Saved {len(self._items)} records to {self.path}")
