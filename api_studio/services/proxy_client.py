"""
Client for the forwarding proxy.

The proxy performs the real HTTP call on our behalf. It is sent
``{method, url, headers, data, params}`` and answers with
``{status, statusText, data, headers, isError?}``; ``isError`` marks a
non-2xx answer from the target. Anything that is not such a reply is a
transport failure.
"""

import logging

import httpx
from pydantic import ValidationError as PydanticValidationError

from .. import config
from ..exceptions import TransportError
from ..schemas.execute import ProxyReply, WireRequest


logger = logging.getLogger(__name__)


class ProxyClient:
    """
    Sends wire requests through the forwarding proxy.

    Args:
        endpoint: Proxy URL; ``config.PROXY_URL`` if None
        client: Shared ``httpx.AsyncClient``; one is created per dispatch if None
        transport: Transport for per-dispatch clients (tests pass a MockTransport)
    """

    def __init__(
        self,
        endpoint: str | None = None,
        client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.endpoint = endpoint or config.PROXY_URL
        self._client = client
        self._transport = transport

    async def dispatch(self, wire: WireRequest) -> ProxyReply:
        """
        Forward a wire request and return the proxy's structured reply.

        No timeout is applied here; callers bound the wait themselves.

        Raises:
            TransportError: The proxy was unreachable or answered without a reply
        """
        logger.info("Dispatching %s %s via %s", wire.method, wire.url, self.endpoint)
        try:
            if self._client is not None:
                response = await self._client.post(self.endpoint, json=wire.to_proxy_payload())
            else:
                async with httpx.AsyncClient(timeout=None, transport=self._transport) as client:
                    response = await client.post(self.endpoint, json=wire.to_proxy_payload())
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError("Failed to reach proxy", details=str(e)) from e
        except ValueError as e:
            # Body could not be serialized to JSON
            raise TransportError("Request could not be encoded", details=str(e)) from e

        try:
            payload = response.json()
        except ValueError as e:
            raise TransportError(
                "Proxy returned a non-JSON reply",
                details=f"HTTP {response.status_code}",
            ) from e

        if not isinstance(payload, dict) or "status" not in payload:
            # The proxy's own failure body: {message, error}
            message = "No response received from target"
            details = None
            if isinstance(payload, dict):
                message = payload.get("message") or message
                details = payload.get("error")
            raise TransportError(message, details=details)

        try:
            return ProxyReply.model_validate(payload)
        except PydanticValidationError as e:
            raise TransportError("Malformed proxy reply", details=str(e)) from e
