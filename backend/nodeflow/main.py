# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Nodeflow API - FastAPI application factory and server entry point
"""
# Load environment variables from .env file (local development)
from dotenv import load_dotenv
from pathlib import Path as _PathForEnv
_env_path = _PathForEnv.cwd() / ".env"
if _env_path.exists():
    load_dotenv(_env_path)

import argparse
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from nodeflow import __version__
from nodeflow.api import system, workflows
from nodeflow.capabilities import build_capability_registry
from nodeflow.core.config import Config, get_config
from nodeflow.core.errors import NodeflowError
from nodeflow.core.logging import get_api_logger
from nodeflow.execution_store import ExecutionRecorder, ExecutionStore
from nodeflow.services.workflow_service import WorkflowService
from nodeflow.workflow_engine import WorkflowEngine
from nodeflow.workflow_store import WorkflowStore

logger = get_api_logger()


def create_app(config: Optional[Config] = None) -> FastAPI:
    """
    Build the application.

    Args:
        config: Explicit configuration (defaults to the global YAML config)
    """
    config = config or get_config()

    registry = build_capability_registry(config)
    execution_store = ExecutionStore(config.executions_path)
    engine = WorkflowEngine(registry, ExecutionRecorder(execution_store))
    service = WorkflowService(WorkflowStore(config.workflows_path), execution_store, engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.initialize()
        logger.info(f"Nodeflow {__version__} ready, data dir: {config.data_dir}")
        yield
        await service.shutdown()

    app = FastAPI(
        title="Nodeflow",
        description="Node-graph workflow automation backend",
        version=__version__,
        lifespan=lifespan,
    )

    # Runtime objects for dependency injection
    app.state.config = config
    app.state.capabilities = registry
    app.state.workflow_service = service

    # CORS for frontend
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_credentials="*" not in config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(NodeflowError)
    async def nodeflow_error_handler(request: Request, exc: NodeflowError) -> JSONResponse:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    app.include_router(system.router, prefix=config.api_prefix)
    app.include_router(workflows.router, prefix=config.api_prefix)

    return app


def main() -> None:
    import uvicorn

    parser = argparse.ArgumentParser(description="Run the Nodeflow API server")
    parser.add_argument("--host", help="Bind address (default: service.host from config)")
    parser.add_argument("--port", type=int, help="Port (default: service.port from config)")
    args = parser.parse_args()

    config = get_config()
    uvicorn.run(
        create_app(config),
        host=args.host or config.service_host,
        port=args.port or config.service_port,
    )


if __name__ == "__main__":
    main()
