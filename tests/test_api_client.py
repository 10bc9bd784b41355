"""
Tests for the async API client
"""

import json

import httpx
import pytest

from main import app
from shared.api_client import SEOgenixClient
from shared.errors import ClientInputError, EntitlementDenied, SEOgenixError


def recording_transport(status_code=200, body=None):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(status_code, json=body if body is not None else {"response": "ok"})

    return httpx.MockTransport(handler), requests


@pytest.mark.asyncio
async def test_basic_tier_analytical_message_answered_locally():
    transport, requests = recording_transport()
    client = SEOgenixClient(base_url="http://api.test", transport=transport)

    result = await client.send_chat_message("Can you optimize my landing page?", "user-1", "core")
    await client.close()

    assert result["intercepted"] is True
    assert "How do I run an AI visibility audit?" in result["response"]
    assert requests == []


@pytest.mark.asyncio
async def test_basic_tier_tool_question_is_sent():
    transport, requests = recording_transport()
    client = SEOgenixClient(base_url="http://api.test", transport=transport)

    await client.send_chat_message("Where is the schema generator?", "user-1", "core", site_id="site-1")
    await client.close()

    assert len(requests) == 1
    assert requests[0].url.path == "/api/chatbot"
    sent = json.loads(requests[0].content)
    assert sent["subscription_level"] == "core"
    assert sent["site_id"] == "site-1"


@pytest.mark.asyncio
async def test_full_tier_never_intercepted():
    transport, requests = recording_transport()
    client = SEOgenixClient(base_url="http://api.test", transport=transport)

    await client.send_chat_message("Please analyze my competitors", "user-1", "pro")
    await client.close()

    assert len(requests) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code,error_cls", [
    (400, ClientInputError),
    (403, EntitlementDenied),
    (500, SEOgenixError),
])
async def test_error_statuses_raise(status_code, error_cls):
    transport, _ = recording_transport(status_code, {"error": "boom", "message": "Friendly text"})
    client = SEOgenixClient(base_url="http://api.test", transport=transport)

    with pytest.raises(error_cls) as exc:
        await client.analyze_content("x" * 60)
    await client.close()

    assert exc.value.status_code == status_code
    assert exc.value.message == "boom"
    assert exc.value.friendly_message == "Friendly text"


@pytest.mark.asyncio
async def test_against_application():
    client = SEOgenixClient(base_url="http://testserver", transport=httpx.ASGITransport(app=app))

    with pytest.raises(EntitlementDenied) as exc:
        await client.send_chat_message("Hello there", "user-1", "free")
    await client.close()

    assert exc.value.status_code == 403
    assert "Upgrade" in exc.value.friendly_message


@pytest.mark.asyncio
async def test_non_json_error_body_raises_typed_error():
    def handler(request):
        return httpx.Response(502, text="<html><body>Bad gateway</body></html>")

    client = SEOgenixClient(base_url="http://api.test", transport=httpx.MockTransport(handler))

    with pytest.raises(SEOgenixError) as exc:
        await client.run_audit("site-1", "https://acme.example")
    await client.close()

    assert exc.value.status_code == 502
    assert exc.value.message == "Bad Gateway"
