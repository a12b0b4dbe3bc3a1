# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for ExecutionStore and ExecutionRecorder
"""

from datetime import timedelta

import pytest

from nodeflow.execution_store import ExecutionRecorder, ExecutionStore
from nodeflow.workflow_models import Log, LogData, utc_now


@pytest.fixture
def store(tmp_path):
    return ExecutionStore(tmp_path / "executions.json")


class TestRecorder:
    """Execution record construction"""

    @pytest.mark.asyncio
    async def test_record_fields(self, store):
        started = utc_now()
        logs = [Log(data=LogData(kind="node_start", node_id="1"))]

        execution = await ExecutionRecorder(store).record("w1", started, started + timedelta(milliseconds=250), logs)

        assert execution.workflow_id == "w1"
        assert execution.status == "completed"
        assert execution.duration == 250
        assert execution.input == {}
        assert execution.timestamp == started
        assert len(execution.logs) == 1

    @pytest.mark.asyncio
    async def test_unsaved_workflow_recorded_as_unknown(self, store):
        now = utc_now()

        execution = await ExecutionRecorder(store).record(None, now, now, [])

        assert execution.workflow_id == "unknown"

    @pytest.mark.asyncio
    async def test_duration_never_negative(self, store):
        now = utc_now()

        execution = await ExecutionRecorder(store).record("w1", now, now - timedelta(seconds=1), [])

        assert execution.duration == 0


class TestHistory:
    """Per-workflow history queries"""

    @pytest.mark.asyncio
    async def test_history_filtered_newest_first(self, store):
        recorder = ExecutionRecorder(store)
        now = utc_now()
        first = await recorder.record("w1", now, now, [])
        await recorder.record("w2", now, now, [])
        second = await recorder.record("w1", now, now, [])

        history = await store.list_for_workflow("w1")

        assert [e.id for e in history] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_history_survives_reload(self, tmp_path):
        path = tmp_path / "executions.json"
        now = utc_now()
        await ExecutionRecorder(ExecutionStore(path)).record("w1", now, now, [])

        reloaded = ExecutionStore(path)
        await reloaded.initialize()

        assert len(await reloaded.list_for_workflow("w1")) == 1
