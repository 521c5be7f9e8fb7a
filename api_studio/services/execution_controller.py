"""
Send lifecycle for request tabs.

A send moves its tab from ``idle`` to ``sending`` and then to
``succeeded`` or ``failed``. Failures never propagate to the caller; they
become tab state. Settled sends are appended to the history ledger in the
order they settle:

- success: recorded
- upstream error (target answered non-2xx): recorded, with its response
- transport failure or deadline (no reply at all): not recorded unless
  ``record_transport_errors`` is set
"""

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from typing import Any

from .. import config
from ..exceptions import TransportError
from ..schemas.environment import Environment
from ..schemas.execute import ExecutionError, ProxyReply, ResponseData, WireRequest
from ..schemas.history import ERROR_STATUS, ExecutionRecord
from ..schemas.request import RequestDefinition
from ..schemas.tab import TabState
from .dynamic_variables import DynamicGeneratorRegistry
from .history_ledger import HistoryLedger
from .proxy_client import ProxyClient
from .request_assembler import assemble
from .tab_store import TabStore


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SendOutcome:
    """
    Result of one send.

    Attributes:
        state: The tab's state after this send settled
        record: The history record appended for this send, if any
        discarded: True if a newer send for the tab superseded this one
    """
    state: TabState
    record: ExecutionRecord | None = None
    discarded: bool = False


def response_size(data: Any) -> int:
    """Byte length of the compact JSON serialization of a response body."""
    text = json.dumps(data, ensure_ascii=False, separators=(",", ":"), default=str)
    return len(text.encode("utf-8"))


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.perf_counter() - start) * 1000))


class ExecutionController:
    """
    Drives sends for request tabs.

    Args:
        proxy: Client for the forwarding proxy
        ledger: History ledger to append settled sends to
        registry: Dynamic variable registry used during assembly
        record_transport_errors: Also record sends that got no reply
    """

    def __init__(
        self,
        proxy: ProxyClient,
        ledger: HistoryLedger | None = None,
        registry: DynamicGeneratorRegistry | None = None,
        record_transport_errors: bool = config.RECORD_TRANSPORT_ERRORS,
    ):
        self.proxy = proxy
        self.ledger = ledger if ledger is not None else HistoryLedger()
        self.registry = registry
        self.record_transport_errors = record_transport_errors
        self.tabs = TabStore()

    def state(self, tab_id: str) -> TabState:
        return self.tabs.get(tab_id)

    def close_tab(self, tab_id: str) -> None:
        self.tabs.close(tab_id)

    def preview(
        self,
        definition: RequestDefinition,
        environment: Environment | None = None,
    ) -> WireRequest:
        """Assemble a request exactly as ``send`` would, without sending it."""
        return assemble(definition, environment, registry=self.registry)

    async def send(
        self,
        tab_id: str,
        definition: RequestDefinition,
        environment: Environment | None = None,
        *,
        timeout: float | None = None,
    ) -> SendOutcome:
        """
        Assemble and send a request for a tab.

        Args:
            tab_id: Tab the send belongs to
            definition: The templated request
            environment: Active environment, or None
            timeout: Seconds to wait for the proxy; None waits indefinitely

        Returns:
            SendOutcome with the tab state after settling
        """
        definition = definition.model_copy(deep=True)
        snapshot = environment.model_copy(deep=True) if environment is not None else None

        start = time.perf_counter()
        generation = self.tabs.begin(tab_id).generation
        wire = assemble(definition, snapshot, registry=self.registry)

        try:
            if timeout is None:
                reply = await self.proxy.dispatch(wire)
            else:
                reply = await asyncio.wait_for(self.proxy.dispatch(wire), timeout)
        except asyncio.TimeoutError:
            error = ExecutionError(
                kind="timeout",
                message="Request timed out",
                details=f"No reply within {timeout} seconds",
            )
            return self._settle_without_reply(tab_id, generation, definition, wire, error, start)
        except TransportError as e:
            error = ExecutionError(kind="transport", message=e.message, details=e.details)
            return self._settle_without_reply(tab_id, generation, definition, wire, error, start)
        except Exception as e:
            logger.exception("Unexpected error sending %s %s", wire.method, wire.url)
            error = ExecutionError(kind="transport", message="Request failed", details=str(e))
            return self._settle_without_reply(tab_id, generation, definition, wire, error, start)

        return self._settle_with_reply(tab_id, generation, definition, wire, reply, start)

    def _settle_with_reply(
        self,
        tab_id: str,
        generation: int,
        definition: RequestDefinition,
        wire: WireRequest,
        reply: ProxyReply,
        start: float,
    ) -> SendOutcome:
        response = ResponseData(
            status=reply.status,
            status_text=reply.status_text,
            data=reply.data,
            headers=reply.headers,
            elapsed_ms=_elapsed_ms(start),
            size=response_size(reply.data),
        )
        error = None
        if reply.is_error:
            error = ExecutionError(
                kind="upstream",
                message=f"{reply.status} {reply.status_text}".strip(),
            )

        record = ExecutionRecord(
            method=wire.method,
            url=wire.url,
            status=response.status,
            status_text=response.status_text,
            request_headers=wire.headers,
            request_params=wire.params,
            request_body=wire.body,
            response_headers=response.headers,
            response_body=response.data,
            elapsed_ms=response.elapsed_ms,
            size=response.size,
            request=definition,
        )
        self.ledger.append(record)

        logger.info(
            "%s %s settled with %s in %d ms",
            wire.method, wire.url, reply.status, response.elapsed_ms,
        )
        return self._apply(tab_id, generation, response, error, record)

    def _settle_without_reply(
        self,
        tab_id: str,
        generation: int,
        definition: RequestDefinition,
        wire: WireRequest,
        error: ExecutionError,
        start: float,
    ) -> SendOutcome:
        logger.warning("%s %s failed: %s (%s)", wire.method, wire.url, error.message, error.details)

        record = None
        if self.record_transport_errors:
            record = ExecutionRecord(
                method=wire.method,
                url=wire.url,
                status=ERROR_STATUS,
                status_text=error.message,
                request_headers=wire.headers,
                request_params=wire.params,
                request_body=wire.body,
                elapsed_ms=_elapsed_ms(start),
                request=definition,
            )
            self.ledger.append(record)

        return self._apply(tab_id, generation, None, error, record)

    def _apply(
        self,
        tab_id: str,
        generation: int,
        response: ResponseData | None,
        error: ExecutionError | None,
        record: ExecutionRecord | None,
    ) -> SendOutcome:
        applied = self.tabs.settle(tab_id, generation, response, error)
        if not applied:
            logger.warning(
                "Discarding stale result for tab %s (generation %d)", tab_id, generation
            )
        return SendOutcome(state=self.tabs.get(tab_id), record=record, discarded=not applied)
