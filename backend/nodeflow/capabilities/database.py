# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
PostgreSQL node - runs one SQL query and returns a JSON envelope

Config:
    host (localhost), port (5432), database, username, password (""), query

Output on success:
    {"success": true, "message": "...", "columns": [{"name", "type"}],
     "data": [{column: value}], "row_count": N}

Missing parameters, query errors and timeouts are logged as
"postgresql-error" and yield empty output. A failed connection aborts the run.
"""
import asyncio
import json
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List, Optional

import psycopg
from psycopg.conninfo import make_conninfo

from nodeflow.capabilities.base import NodeCapability, NodeResult
from nodeflow.core.logging import get_service_logger
from nodeflow.event_sink import EventSink
from nodeflow.workflow_models import Node

logger = get_service_logger("database")

REQUIRED_PARAMS = (
    ("database", "database name is empty"),
    ("username", "username is empty"),
    ("query", "SQL query is empty"),
)


def to_json_value(value: Any) -> Any:
    """Map a column value onto JSON; unsupported types become null"""
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, date):
        return value.strftime("%Y-%m-%d")
    if isinstance(value, Decimal):
        return float(value)
    return None


class DatabaseQueryCapability(NodeCapability):
    """Executes config["query"] against PostgreSQL with psycopg"""

    kind = "postgresql"

    def __init__(
        self,
        connect_timeout: int = 10,
        query_timeout: float = 30.0,
        connect: Optional[Callable] = None,
    ):
        self.connect_timeout = connect_timeout
        self.query_timeout = query_timeout
        self.connect = connect or psycopg.AsyncConnection.connect

    async def execute(self, node: Node, sink: Optional[EventSink]) -> NodeResult:
        result = NodeResult()

        for key, message in REQUIRED_PARAMS:
            if node.config.get(key) is None:
                self.emit(result, node, sink, "postgresql-error", data=message)
                return result

        host = node.config.get("host", "localhost")
        port = node.config.get("port", "5432")
        database = node.config["database"]
        username = node.config["username"]
        query = node.config["query"]

        self.emit(
            result, node, sink, "postgresql-info",
            data=f"Connecting to PostgreSQL database: {username}@{host}:{port}/{database}",
        )

        conninfo = make_conninfo(
            host=host,
            port=port,
            dbname=database,
            user=username,
            password=node.config.get("password", ""),
            connect_timeout=self.connect_timeout,
        )
        try:
            conn = await self.connect(conninfo, autocommit=True)
        except (psycopg.Error, OSError) as e:
            logger.error(f"Failed to connect to PostgreSQL at {host}:{port}/{database}: {e}")
            self.emit(result, node, sink, "postgresql-error", data=f"Failed to connect to database: {e}")
            raise self.fail(node, f"failed to connect to database: {e}")

        try:
            envelope = await asyncio.wait_for(self._run_query(conn, query), timeout=self.query_timeout)
        except asyncio.TimeoutError:
            self.emit(result, node, sink, "postgresql-error", data="Query timed out")
            return result
        except psycopg.Error as e:
            logger.warning(f"PostgreSQL query failed: {e}")
            self.emit(result, node, sink, "postgresql-error", data=f"Query execution failed: {e}")
            return result
        finally:
            await conn.close()

        result.output = envelope
        self.emit(result, node, sink, "output", data=envelope, value=envelope)
        return result

    async def _run_query(self, conn, query: str) -> str:
        async with conn.cursor() as cur:
            await cur.execute(query)
            if cur.description is None:
                return self._envelope([], [])

            rows = await cur.fetchall()
            if not rows:
                return self._envelope([], [])

            columns = [
                {"name": column.name, "type": self._type_name(conn, column.type_code)}
                for column in cur.description
            ]
            data = [
                {column["name"]: to_json_value(value) for column, value in zip(columns, row)}
                for row in rows
            ]
            return self._envelope(columns, data)

    @staticmethod
    def _type_name(conn, type_code: int) -> str:
        info = conn.adapters.types.get(type_code)
        return getattr(info, "name", None) or str(type_code)

    @staticmethod
    def _envelope(columns: List[Dict[str, str]], data: List[Dict[str, Any]]) -> str:
        if data:
            message = f"Query executed successfully, returned {len(data)} rows"
        else:
            message = "Query executed successfully, no rows returned"
        return json.dumps({
            "success": True,
            "message": message,
            "columns": columns,
            "data": data,
            "row_count": len(data),
        }, ensure_ascii=False)
