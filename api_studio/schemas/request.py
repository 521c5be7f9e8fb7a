"""
Pydantic schemas for request definitions.

A request definition is the editable, templated form of an HTTP request
as it lives in a workspace tab or a saved collection. Its string fields
may contain ``{{variable}}`` placeholders.
"""

import uuid
from typing import Literal

from pydantic import BaseModel, Field


# HTTP methods supported by the system
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]

# Body types supported for requests; "json" is the legacy spelling of raw JSON
BodyType = Literal["none", "raw", "form-data", "url-encoded", "binary", "graphql", "json"]

# Sub-type of a raw body
RawType = Literal["Text", "JSON", "HTML", "XML"]

AuthType = Literal["none", "bearer", "basic", "api-key"]

# Methods that carry a body when sending
BODY_METHODS = ("POST", "PUT", "PATCH")


class KeyValue(BaseModel):
    """A single param or header row; inactive rows are kept but not sent."""
    key: str = ""
    value: str = ""
    active: bool = True


class AuthData(BaseModel):
    """
    Authentication settings. Which fields matter depends on the auth type:
    ``token`` for bearer, ``username``/``password`` for basic, and
    ``key``/``value``/``add_to`` for api-key.
    """
    token: str = ""
    username: str = ""
    password: str = ""
    key: str = ""
    value: str = ""
    add_to: Literal["header", "query"] = "header"


class RequestDefinition(BaseModel):
    """Schema for a templated request as edited in a tab."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    name: str = "New Request"
    method: HttpMethod = "GET"
    url: str = ""
    params: list[KeyValue] = []
    headers: list[KeyValue] = []
    body_type: BodyType = "none"
    raw_type: RawType = "JSON"
    body: str = ""
    auth_type: AuthType = "none"
    auth_data: AuthData = AuthData()

    def is_json_body(self) -> bool:
        """True when the body is declared as JSON."""
        return self.body_type == "json" or (self.body_type == "raw" and self.raw_type == "JSON")

