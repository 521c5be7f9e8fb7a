"""
History record API routes.

History records are created when sends settle; they can be listed,
inspected and cleared, but not edited.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_controller
from ..exceptions import ResourceNotFoundError
from ..schemas.history import ExecutionRecord, HistoryListResponse
from ..services.execution_controller import ExecutionController
from ..services.history_service import clear_history


router = APIRouter(prefix="/api/history", tags=["history"])


@router.get("", response_model=HistoryListResponse)
def list_history(
    skip: int = 0,
    limit: int = 100,
    controller: ExecutionController = Depends(get_controller)
):
    """
    Get history records, newest first.

    Args:
        skip: Number of records to skip (for pagination)
        limit: Maximum number of records to return
    """
    records = controller.ledger.snapshot()
    return HistoryListResponse(items=records[skip:skip + limit], total=len(records))


@router.get("/{record_id}", response_model=ExecutionRecord)
def get_history(record_id: str, controller: ExecutionController = Depends(get_controller)):
    """
    Get a single history record by ID.

    Raises:
        ResourceNotFoundError: 404 if history record not found
    """
    record = controller.ledger.get(record_id)
    if record is None:
        raise ResourceNotFoundError("History record", record_id)
    return record


@router.delete("", status_code=status.HTTP_204_NO_CONTENT)
def clear_all_history(
    db: Session = Depends(get_db),
    controller: ExecutionController = Depends(get_controller)
):
    """Clear all history records. Confirmation is up to the client."""
    controller.ledger.clear()
    clear_history(db)
    return None
