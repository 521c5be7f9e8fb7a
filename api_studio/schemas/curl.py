"""
Pydantic schemas for cURL export and import.
"""

from pydantic import BaseModel

from .request import RequestDefinition


class CurlExportRequest(BaseModel):
    """Schema for rendering a request as a cURL command."""
    request: RequestDefinition
    environment_id: int | None = None


class CurlCommand(BaseModel):
    """A cURL command line."""
    command: str
