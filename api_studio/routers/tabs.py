"""
Tab state API routes.
"""

from fastapi import APIRouter, Depends, status

from ..dependencies import get_controller
from ..schemas.tab import TabState
from ..services.execution_controller import ExecutionController


router = APIRouter(prefix="/api/tabs", tags=["tabs"])


@router.get("/{tab_id}", response_model=TabState)
def get_tab_state(tab_id: str, controller: ExecutionController = Depends(get_controller)):
    """Current send state of a tab; unknown tabs are idle."""
    return controller.state(tab_id)


@router.delete("/{tab_id}", status_code=status.HTTP_204_NO_CONTENT)
def close_tab(tab_id: str, controller: ExecutionController = Depends(get_controller)):
    """Close a tab. Results of its in-flight sends are discarded."""
    controller.close_tab(tab_id)
    return None
