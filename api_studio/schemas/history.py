"""
Pydantic schemas for request execution history.
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .request import RequestDefinition


# Status recorded for a send that never produced a structured reply
ERROR_STATUS = "ERR"


class ExecutionRecord(BaseModel):
    """
    Immutable snapshot of one completed execution.

    Attributes:
        id: Unique identifier of the record
        method: HTTP method used
        url: Target URL after variable substitution
        status: Response status code, or ``ERROR_STATUS``
        status_text: Response status text
        timestamp: When the send settled (UTC)
        request_headers: Headers actually sent
        request_params: Query params actually sent
        request_body: Body actually sent (text or parsed JSON)
        response_headers: Headers received
        response_body: Body received
        elapsed_ms: Time from invoke to settle in milliseconds
        size: Response body size in bytes
        request: The templated definition, for reloading into a tab
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    method: str
    url: str
    status: int | str
    status_text: str = ""
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    request_headers: dict[str, str] = {}
    request_params: dict[str, str] = {}
    request_body: Any | None = None
    response_headers: dict[str, Any] = {}
    response_body: Any | None = None
    elapsed_ms: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)
    request: RequestDefinition | None = None

    model_config = ConfigDict(frozen=True)


class HistoryListResponse(BaseModel):
    """Schema for the history list, newest first."""
    items: list[ExecutionRecord]
    total: int
