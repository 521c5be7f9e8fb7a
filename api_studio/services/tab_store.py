"""
Per-tab send state.

State changes are pure functions from one frozen ``TabState`` to the next;
``TabStore`` only holds the current state per tab id. Every started send
bumps the tab's generation, and a settlement is applied only while its
generation is still current, so a slow earlier send cannot overwrite the
result of a later one.
"""

from ..schemas.execute import ExecutionError, ResponseData
from ..schemas.tab import SendStatus, TabState


def begin_send(state: TabState) -> TabState:
    """Enter ``sending`` with a new generation, clearing the previous outcome."""
    return state.model_copy(update={
        "status": SendStatus.SENDING,
        "generation": state.generation + 1,
        "response": None,
        "error": None,
    })


def settle(
    state: TabState,
    generation: int,
    response: ResponseData | None,
    error: ExecutionError | None,
) -> TabState:
    """
    Apply the outcome of the send tagged ``generation``.

    A stale generation returns ``state`` unchanged.
    """
    if generation != state.generation:
        return state
    return state.model_copy(update={
        "status": SendStatus.FAILED if error is not None else SendStatus.SUCCEEDED,
        "response": response,
        "error": error,
    })


class TabStore:
    """Current ``TabState`` for each open tab."""

    def __init__(self):
        self._states: dict[str, TabState] = {}
        # Generation reached by closed tabs, so a reopened tab never reuses one
        self._closed: dict[str, int] = {}

    def get(self, tab_id: str) -> TabState:
        state = self._states.get(tab_id)
        if state is None:
            return TabState(tab_id=tab_id, generation=self._closed.get(tab_id, 0))
        return state

    def begin(self, tab_id: str) -> TabState:
        state = begin_send(self.get(tab_id))
        self._states[tab_id] = state
        return state

    def settle(
        self,
        tab_id: str,
        generation: int,
        response: ResponseData | None = None,
        error: ExecutionError | None = None,
    ) -> bool:
        """Apply a settlement; returns False if it was stale and discarded."""
        current = self._states.get(tab_id)
        if current is None:
            return False
        updated = settle(current, generation, response, error)
        if updated is current:
            return False
        self._states[tab_id] = updated
        return True

    def close(self, tab_id: str) -> None:
        """Forget a tab. Sends still in flight for it are discarded when they settle."""
        state = self._states.pop(tab_id, None)
        if state is not None:
            self._closed[tab_id] = state.generation

    def __contains__(self, tab_id: str) -> bool:
        return tab_id in self._states

    def __len__(self) -> int:
        return len(self._states)
