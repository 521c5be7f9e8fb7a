"""
Request execution API routes.

Sends a tab's request through the forwarding proxy. Variable substitution
uses the given environment or, if none is given, the active one. Every
send the engine records is also written to the history table.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..dependencies import get_controller
from ..schemas.execute import PreviewRequest, SendRequest, WireRequest
from ..schemas.tab import SendResult
from ..services.environment_service import get_environment
from ..services.execution_controller import ExecutionController
from ..services.history_service import save_history


router = APIRouter(prefix="/api/execute", tags=["execute"])


@router.post("/preview", response_model=WireRequest)
def preview_request(
    payload: PreviewRequest,
    db: Session = Depends(get_db),
    controller: ExecutionController = Depends(get_controller)
):
    """
    Assemble a request without sending it.

    An inline environment takes precedence over ``environment_id``.
    Dynamic variables are generated afresh, so they will differ from an
    actual send.
    """
    environment = payload.environment
    if environment is None:
        environment = get_environment(db, payload.environment_id)
    return controller.preview(payload.request, environment)


@router.post("/{tab_id}", response_model=SendResult)
async def send_request(
    tab_id: str,
    payload: SendRequest,
    db: Session = Depends(get_db),
    controller: ExecutionController = Depends(get_controller)
):
    """
    Send a request for a tab and wait for it to settle.

    Upstream errors and transport failures are reported in the returned
    tab state, not as HTTP errors. ``discarded`` is true when a newer send
    for the same tab started while this one was in flight.

    Raises:
        ResourceNotFoundError: 404 if ``environment_id`` doesn't exist
    """
    environment = get_environment(db, payload.environment_id)

    outcome = await controller.send(
        tab_id,
        payload.request,
        environment,
        timeout=payload.timeout,
    )

    if outcome.record is not None:
        save_history(db, outcome.record, capacity=controller.ledger.capacity)

    return SendResult(
        state=outcome.state,
        record_id=outcome.record.id if outcome.record else None,
        discarded=outcome.discarded,
    )
