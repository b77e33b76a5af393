import json

import httpx
import pytest

from sp.clients import openai_api
from sp.clients.openai_api import OpenAIClient


@pytest.fixture
def captured(monkeypatch):
    """Route the client's HTTP calls to an in-process handler."""
    requests = []
    real_client = httpx.AsyncClient

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.headers["Authorization"] != "Bearer sk-test":
            return httpx.Response(401, json={"error": "bad key"})
        return httpx.Response(
            200,
            json={"choices": [{"message": {"content": '{"steps": ["a"]}'}}]},
        )

    def client_factory(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)

    monkeypatch.setattr(openai_api.httpx, "AsyncClient", client_factory)
    return requests


@pytest.mark.asyncio
async def test_complete_json_returns_message_content(captured):
    client = OpenAIClient(api_key="sk-test")

    content = await client.complete_json("Plan Rust", system="Be terse")

    assert content == '{"steps": ["a"]}'
    request = captured[0]
    assert request.url.path.endswith("/chat/completions")
    body = json.loads(request.content)
    assert body["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"] == "Plan Rust"


@pytest.mark.asyncio
async def test_complete_json_raises_on_http_error(captured):
    client = OpenAIClient(api_key="sk-wrong")

    with pytest.raises(httpx.HTTPStatusError):
        await client.complete_json("Plan Rust")
