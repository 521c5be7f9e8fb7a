"""
Pydantic schemas for per-tab send state.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, computed_field

from .execute import ExecutionError, ResponseData


class SendStatus(str, Enum):
    IDLE = "idle"
    SENDING = "sending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class TabState(BaseModel):
    """
    Visible send state of one request tab.

    ``generation`` increases on every send started for the tab; only the
    settlement carrying the current generation may change the state.
    """
    tab_id: str
    status: SendStatus = SendStatus.IDLE
    generation: int = 0
    response: ResponseData | None = None
    error: ExecutionError | None = None

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def is_loading(self) -> bool:
        return self.status is SendStatus.SENDING


class SendResult(BaseModel):
    """Schema for the execute endpoint's reply."""
    state: TabState
    record_id: str | None = None
    discarded: bool = False
