"""
FastAPI dependencies for the request engine.
"""

from fastapi import Request

from .services.execution_controller import ExecutionController


def get_controller(request: Request) -> ExecutionController:
    """The application's execution controller, created at startup."""
    return request.app.state.controller
