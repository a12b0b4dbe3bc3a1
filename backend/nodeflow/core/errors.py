# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Custom exceptions for the Nodeflow backend.

All exceptions inherit from NodeflowError for consistent error handling.
"""

from typing import Optional, List


class NodeflowError(Exception):
    """Base exception for all Nodeflow errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[dict] = None
    ):
        """
        Initialize Nodeflow error.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            details: Additional error details
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """Convert error to dictionary for API response."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details
        }


class NotFoundError(NodeflowError):
    """Resource not found."""

    def __init__(self, resource: str, identifier: str, details: Optional[dict] = None):
        """
        Initialize not found error.

        Args:
            resource: Type of resource (e.g., "Workflow")
            identifier: Resource identifier
            details: Additional error details
        """
        message = f"{resource} not found: {identifier}"
        super().__init__(message, status_code=404, details=details)
        self.resource = resource
        self.identifier = identifier


class ConflictError(NodeflowError):
    """Resource conflict."""

    def __init__(self, message: str, resource: Optional[str] = None, details: Optional[dict] = None):
        super().__init__(message, status_code=409, details=details)
        self.resource = resource


class ExecutionError(NodeflowError):
    """Workflow execution failed."""

    def __init__(self, message: str, workflow_id: Optional[str] = None, details: Optional[dict] = None):
        """
        Initialize execution error.

        Args:
            message: Execution error message
            workflow_id: Workflow being executed, if saved
            details: Additional error details
        """
        super().__init__(message, status_code=500, details=details)
        self.workflow_id = workflow_id


class NodeExecutionError(ExecutionError):
    """A node capability failed in a way that aborts the run."""

    def __init__(self, node_id: str, kind: str, message: str, details: Optional[dict] = None):
        self.node_id = node_id
        self.kind = kind
        self.reason = message
        super().__init__(
            f"Node '{node_id}' ({kind}) failed: {message}",
            details={"node_id": node_id, "kind": kind, **(details or {})}
        )


class UnknownNodeKindError(NodeExecutionError):
    """No capability is registered for a node's kind tag."""

    def __init__(self, node_id: str, kind: str):
        super().__init__(node_id, kind, f"unknown node type '{kind}'")


class CycleDetectedError(ExecutionError):
    """Workflow graph contains a cycle."""

    def __init__(self, node_ids: List[str], workflow_id: Optional[str] = None):
        self.node_ids = node_ids
        super().__init__(
            f"Cycle detected in workflow graph involving nodes: {', '.join(node_ids)}",
            workflow_id=workflow_id,
            details={"node_ids": node_ids}
        )


# Error Message Utilities

def sanitize_error_for_user(error: Exception, include_type: bool = True) -> str:
    """
    Sanitize error messages for user display.
    Removes stack traces and overly long payloads.

    Args:
        error: The exception to sanitize
        include_type: Whether to include exception type

    Returns:
        User-friendly error message without stack trace
    """
    error_msg = str(error).strip()

    # Limit message length
    if len(error_msg) > 500:
        error_msg = error_msg[:500] + "..."

    if include_type:
        return f"{error.__class__.__name__}: {error_msg}"

    return error_msg
