"""Tests for the httpx transport - one attempt, errors mapped to codes."""

import pytest
import httpx
from unittest.mock import AsyncMock, patch

from retry429.exceptions import ConnectionError, ProtocolError, TimeoutError, TransportError
from retry429.models import Request
from retry429.transport import HttpxTransport


def create_response(status_code: int, json_data: dict | None = None, text: str = "", headers: dict | None = None) -> httpx.Response:
    """Create a mock response with a proper request object."""
    request = httpx.Request("GET", "https://nodejs.example.com/foo")
    if json_data:
        return httpx.Response(status_code, json=json_data, headers=headers, request=request)
    return httpx.Response(status_code, text=text, headers=headers, request=request)


@pytest.fixture
def transport():
    return HttpxTransport(timeout=5.0)


@pytest.fixture
def request_descriptor():
    return Request(
        url="https://nodejs.example.com/foo",
        method="PUT",
        auth=("nodejs", "sjedon"),
        headers={"Accept": "application/json"},
        body=b'{"a": 1}',
    )


class TestHttpxTransportSend:
    """Test a single physical attempt."""

    @pytest.mark.asyncio
    async def test_returns_buffered_response(self, transport, request_descriptor):
        """Given 201, returns status, headers and full body."""
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = create_response(201, {"ok": True})

            response = await transport.send(request_descriptor)

            assert response.status_code == 201
            assert response.json() == {"ok": True}
            assert response.header("content-type") == "application/json"

    @pytest.mark.asyncio
    async def test_rate_limited_response_is_returned_not_raised(self, transport, request_descriptor):
        """The transport does not treat 429 as an error."""
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = create_response(429, {"error": "too_many_requests"})

            response = await transport.send(request_descriptor)

            assert response.status_code == 429
            assert response.is_rate_limited

    @pytest.mark.asyncio
    async def test_passes_request_fields_through(self, transport, request_descriptor):
        """Method, URL, auth, headers and body reach httpx untouched."""
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.return_value = create_response(200, {"ok": True})

            await transport.send(request_descriptor)

            call = mock_request.call_args
            assert call.args == ("PUT", "https://nodejs.example.com/foo")
            assert call.kwargs["auth"] == ("nodejs", "sjedon")
            assert call.kwargs["headers"] == {"Accept": "application/json"}
            assert call.kwargs["content"] == b'{"a": 1}'


class TestHttpxTransportErrors:
    """Test mapping of httpx failures to transport errors."""

    @pytest.mark.asyncio
    async def test_read_error_maps_to_connection_reset(self, transport, request_descriptor):
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.ReadError("socket hang up")

            with pytest.raises(ConnectionError) as exc_info:
                await transport.send(request_descriptor)

            assert exc_info.value.code == "ECONNRESET"
            assert exc_info.value.message == "socket hang up"

    @pytest.mark.asyncio
    async def test_connect_error_maps_to_connection_refused(self, transport, request_descriptor):
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.ConnectError("Connection refused")

            with pytest.raises(ConnectionError) as exc_info:
                await transport.send(request_descriptor)

            assert exc_info.value.code == "ECONNREFUSED"

    @pytest.mark.asyncio
    async def test_timeout_maps_to_timeout_error(self, transport, request_descriptor):
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.ReadTimeout("timed out")

            with pytest.raises(TimeoutError):
                await transport.send(request_descriptor)

    @pytest.mark.asyncio
    async def test_remote_protocol_error_maps_to_protocol_error(self, transport, request_descriptor):
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.RemoteProtocolError("Server disconnected")

            with pytest.raises(ProtocolError):
                await transport.send(request_descriptor)

    @pytest.mark.asyncio
    async def test_other_request_errors_are_transport_errors(self, transport, request_descriptor):
        with patch.object(httpx.AsyncClient, "request", new_callable=AsyncMock) as mock_request:
            mock_request.side_effect = httpx.UnsupportedProtocol("Request URL has an unsupported protocol")

            with pytest.raises(TransportError) as exc_info:
                await transport.send(request_descriptor)

            assert exc_info.value.code == "EREQUEST"


class TestHttpxTransportOptions:
    """Test pass-through of client options."""

    def test_keeps_httpx_options(self):
        transport = HttpxTransport(options={"verify": False, "follow_redirects": True})

        assert transport.client_options == {"verify": False, "follow_redirects": True}

    def test_ignores_options_httpx_does_not_know(self):
        transport = HttpxTransport(options={"https": True, "verify": False})

        assert transport.client_options == {"verify": False}
