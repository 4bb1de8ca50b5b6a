"""
Tests for the single-shot JSON forwarding helper.
"""

import httpx
import pytest

from transak_gateway.errors import ParseError, RemoteError
from transak_gateway.services.http import forward_json

URL = "https://api-gateway-stg.transak.com/api/v1/auth/token"


class TestForwardJson:

    @pytest.mark.asyncio
    async def test_returns_parsed_json_on_2xx(self, upstream):
        upstream.reply(201, {"access_token": "abc"})

        data = await forward_json(URL, "POST", {"api_key": "k"}, {"X-Trace": "1"}, transport=upstream.transport)

        assert data == {"access_token": "abc"}
        sent = upstream.calls[0]
        assert sent.method == "POST"
        assert sent.headers["content-type"] == "application/json"
        assert sent.headers["x-trace"] == "1"
        assert upstream.sent_json() == {"api_key": "k"}

    @pytest.mark.asyncio
    async def test_non_2xx_raises_remote_error_with_upstream_message(self, upstream):
        upstream.reply(401, {"message": "Unauthorized"})

        with pytest.raises(RemoteError) as exc_info:
            await forward_json(URL, "POST", {}, transport=upstream.transport)

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"

    @pytest.mark.asyncio
    async def test_non_2xx_without_message_reports_status(self, upstream):
        upstream.reply(503, raw=b"upstream down")

        with pytest.raises(RemoteError) as exc_info:
            await forward_json(URL, "POST", {}, transport=upstream.transport)

        assert exc_info.value.status_code == 503
        assert exc_info.value.message == "HTTP 503: upstream down"

    @pytest.mark.asyncio
    async def test_2xx_with_invalid_json_raises_parse_error(self, upstream):
        upstream.reply(200, raw=b"{not json")

        with pytest.raises(ParseError):
            await forward_json(URL, "POST", {}, transport=upstream.transport)

    @pytest.mark.asyncio
    async def test_transport_failure_is_remote_error_without_status(self):
        def boom(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(RemoteError) as exc_info:
            await forward_json(URL, "POST", {}, transport=httpx.MockTransport(boom))

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_single_attempt_no_retry(self, upstream):
        upstream.reply(500, {"message": "boom"})

        with pytest.raises(RemoteError):
            await forward_json(URL, "POST", {}, transport=upstream.transport)

        assert len(upstream.calls) == 1
