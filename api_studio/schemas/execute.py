"""
Pydantic schemas for request execution.

Covers the assembled wire request, the proxy's reply, and the normalized
response/error shapes exposed to callers.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .environment import Environment
from .request import HttpMethod, RequestDefinition


class WireRequest(BaseModel):
    """A fully resolved request, ready to hand to the proxy."""
    method: HttpMethod
    url: str
    headers: dict[str, str] = {}
    params: dict[str, str] = {}
    body: Any | None = None

    def to_proxy_payload(self) -> dict[str, Any]:
        """Body of the ``POST`` sent to the forwarding proxy."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": self.headers,
            "data": self.body,
            "params": self.params,
        }


class ProxyReply(BaseModel):
    """
    Structured reply from the forwarding proxy.

    ``is_error`` is set when the target answered with a non-2xx status;
    status, data and headers are then the target's own.
    """
    status: int
    status_text: str = Field(default="", alias="statusText")
    data: Any = None
    headers: dict[str, Any] = {}
    is_error: bool = Field(default=False, alias="isError")

    model_config = ConfigDict(populate_by_name=True)


class ResponseData(BaseModel):
    """Normalized response shown for a tab, for both success and upstream errors."""
    status: int
    status_text: str
    data: Any = None
    headers: dict[str, Any] = {}
    elapsed_ms: int
    size: int

    model_config = ConfigDict(frozen=True)


ErrorKind = Literal["upstream", "transport", "timeout"]


class ExecutionError(BaseModel):
    """Why a send failed."""
    kind: ErrorKind
    message: str
    details: str | None = None

    model_config = ConfigDict(frozen=True)


class SendRequest(BaseModel):
    """Schema for ``POST /api/execute/{tab_id}``."""
    request: RequestDefinition
    environment_id: int | None = None
    timeout: float | None = None


class PreviewRequest(BaseModel):
    """Schema for assembling a request without sending it."""
    request: RequestDefinition
    environment_id: int | None = None
    environment: Environment | None = None
