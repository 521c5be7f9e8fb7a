"""
Pydantic schemas package.

Exports all schemas for request definitions, environments, execution
and history.
"""

from .request import (
    HttpMethod,
    BodyType,
    RawType,
    AuthType,
    KeyValue,
    AuthData,
    RequestDefinition,
)

from .environment import (
    VariableBase,
    VariableCreate,
    VariableUpdate,
    VariableResponse,
    EnvironmentBase,
    EnvironmentCreate,
    EnvironmentUpdate,
    EnvironmentResponse,
    EnvironmentWithVariables,
    Variable,
    Environment,
)

from .execute import (
    WireRequest,
    ProxyReply,
    ResponseData,
    ExecutionError,
    SendRequest,
    PreviewRequest,
)

from .tab import (
    SendStatus,
    TabState,
    SendResult,
)

from .history import (
    ERROR_STATUS,
    ExecutionRecord,
    HistoryListResponse,
)

from .curl import (
    CurlExportRequest,
    CurlCommand,
)

__all__ = [
    # Request schemas
    "HttpMethod",
    "BodyType",
    "RawType",
    "AuthType",
    "KeyValue",
    "AuthData",
    "RequestDefinition",
    # Environment schemas
    "VariableBase",
    "VariableCreate",
    "VariableUpdate",
    "VariableResponse",
    "EnvironmentBase",
    "EnvironmentCreate",
    "EnvironmentUpdate",
    "EnvironmentResponse",
    "EnvironmentWithVariables",
    "Variable",
    "Environment",
    # Execute schemas
    "WireRequest",
    "ProxyReply",
    "ResponseData",
    "ExecutionError",
    "SendRequest",
    "PreviewRequest",
    # Tab schemas
    "SendStatus",
    "TabState",
    "SendResult",
    # History schemas
    "ERROR_STATUS",
    "ExecutionRecord",
    "HistoryListResponse",
    # cURL schemas
    "CurlExportRequest",
    "CurlCommand",
]
