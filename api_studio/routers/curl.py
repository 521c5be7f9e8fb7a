"""
cURL export and import API routes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_controller
from ..schemas.curl import CurlCommand, CurlExportRequest
from ..schemas.request import RequestDefinition
from ..services.curl import build_curl, parse_curl
from ..services.environment_service import get_environment
from ..services.execution_controller import ExecutionController


router = APIRouter(prefix="/api/curl", tags=["curl"])


@router.post("/export", response_model=CurlCommand)
def export_curl(
    payload: CurlExportRequest,
    db: Session = Depends(get_db),
    controller: ExecutionController = Depends(get_controller)
):
    """Render a request as a cURL command, with placeholders resolved."""
    environment = get_environment(db, payload.environment_id)
    return CurlCommand(command=build_curl(payload.request, environment, controller.registry))


@router.post("/import", response_model=RequestDefinition)
def import_curl(payload: CurlCommand):
    """
    Parse a cURL command into a request definition.

    Raises:
        CurlParseError: 400 if the command has no URL
    """
    return parse_curl(payload.command)
