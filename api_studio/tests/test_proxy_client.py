"""
Tests for the forwarding proxy client, using httpx's mock transport.
"""

import asyncio
import json

import httpx
import pytest

from api_studio.exceptions import TransportError
from api_studio.schemas.execute import WireRequest
from api_studio.services.proxy_client import ProxyClient


PROXY_URL = "http://proxy.test/proxy"


def make_client(handler) -> ProxyClient:
    return ProxyClient(PROXY_URL, transport=httpx.MockTransport(handler))


def wire(**overrides) -> WireRequest:
    data = {
        "method": "POST",
        "url": "https://api.test/items",
        "headers": {"Content-Type": "application/json"},
        "params": {"page": "1"},
        "body": {"name": "x"},
    }
    data.update(overrides)
    return WireRequest(**data)


class TestDispatch:

    def test_posts_wire_request_to_proxy(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["payload"] = json.loads(request.content)
            return httpx.Response(200, json={"status": 201, "statusText": "Created", "data": {}, "headers": {}})

        asyncio.run(make_client(handler).dispatch(wire()))

        assert seen["method"] == "POST"
        assert seen["url"] == PROXY_URL
        assert seen["payload"] == {
            "method": "POST",
            "url": "https://api.test/items",
            "headers": {"Content-Type": "application/json"},
            "data": {"name": "x"},
            "params": {"page": "1"},
        }

    def test_success_reply(self):
        def handler(request):
            return httpx.Response(200, json={
                "status": 200,
                "statusText": "OK",
                "data": {"id": 1},
                "headers": {"content-type": "application/json"},
            })

        reply = asyncio.run(make_client(handler).dispatch(wire()))

        assert reply.status == 200
        assert reply.status_text == "OK"
        assert reply.data == {"id": 1}
        assert reply.is_error is False

    def test_upstream_error_reply(self):
        def handler(request):
            return httpx.Response(200, json={
                "status": 404,
                "statusText": "Not Found",
                "data": {"msg": "no"},
                "headers": {},
                "isError": True,
            })

        reply = asyncio.run(make_client(handler).dispatch(wire()))

        assert reply.is_error is True
        assert reply.status == 404
        assert reply.data == {"msg": "no"}

    def test_proxy_failure_body_is_a_transport_error(self):
        def handler(request):
            return httpx.Response(500, json={
                "message": "No response received from target",
                "error": "getaddrinfo ENOTFOUND api.test",
            })

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(make_client(handler).dispatch(wire()))

        assert exc_info.value.message == "No response received from target"
        assert "ENOTFOUND" in exc_info.value.details

    def test_unreachable_proxy_is_a_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            asyncio.run(make_client(handler).dispatch(wire()))

        assert "refused" in exc_info.value.details

    def test_non_json_reply_is_a_transport_error(self):
        def handler(request):
            return httpx.Response(502, text="<html>Bad Gateway</html>")

        with pytest.raises(TransportError):
            asyncio.run(make_client(handler).dispatch(wire()))

    def test_shared_client_is_used(self):
        def handler(request):
            return httpx.Response(200, json={"status": 204, "statusText": "No Content"})

        async def run():
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
                return await ProxyClient(PROXY_URL, client=client).dispatch(wire(body=None))

        reply = asyncio.run(run())

        assert reply.status == 204
        assert reply.data is None
