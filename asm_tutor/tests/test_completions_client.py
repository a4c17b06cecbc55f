import asyncio

import httpx
import pytest

from asm_tutor.src.engine import completions


_MESSAGES = [{"role": "system", "content": "be brief"}, {"role": "user", "content": "hi"}]


class _Resp:
    def __init__(self, status_code=200, body=None, text="", reason_phrase="OK"):
        self.status_code = status_code
        self._body = body
        self.text = text
        self.reason_phrase = reason_phrase

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class _Client:
    def __init__(self, resp=None, exc=None):
        self.resp = resp
        self.exc = exc
        self.calls = []

    async def post(self, url, **kwargs):
        self.calls.append({"url": url, **kwargs})
        if self.exc is not None:
            raise self.exc
        return self.resp


@pytest.fixture
def install_client():
    def _install(client):
        completions.set_client(client)  # type: ignore[arg-type]
        return client

    try:
        yield _install
    finally:
        completions.set_client(None)


async def _query(api_key="sk-test-0123456789abcdef"):
    return await completions.query_completion(
        _MESSAGES,
        api_key=api_key,
        model="gpt-3.5-turbo",
        temperature=0.7,
    )


@pytest.mark.asyncio
async def test_query_completion_posts_authenticated_json(install_client):
    client = install_client(
        _Client(
            _Resp(
                body={
                    "choices": [{"message": {"role": "assistant", "content": "  EAX is a register.  "}}],
                    "usage": {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7},
                }
            )
        )
    )

    res = await _query()

    assert res.ok is True
    assert res.content == "  EAX is a register.  "
    assert res.usage == {"prompt_tokens": 3, "completion_tokens": 4, "total_tokens": 7}
    assert res.status_code == 200
    assert len(client.calls) == 1

    call = client.calls[0]
    assert call["url"] == completions.OPENAI_API_URL
    assert call["headers"]["Authorization"] == "Bearer sk-test-0123456789abcdef"
    assert call["headers"]["Content-Type"] == "application/json"
    assert call["json"] == {"model": "gpt-3.5-turbo", "messages": _MESSAGES, "temperature": 0.7}


@pytest.mark.asyncio
async def test_non_2xx_surfaces_body_text(install_client):
    install_client(_Client(_Resp(status_code=429, text="You exceeded your current quota")))

    res = await _query()

    assert res.ok is False
    assert res.status_code == 429
    assert res.error_text == "You exceeded your current quota"
    assert res.content is None


@pytest.mark.asyncio
async def test_non_2xx_without_body_uses_status_line(install_client):
    install_client(_Client(_Resp(status_code=503, text="", reason_phrase="Service Unavailable")))

    res = await _query()

    assert res.ok is False
    assert res.error_text == "503 Service Unavailable"


@pytest.mark.asyncio
async def test_error_text_does_not_echo_the_key(install_client):
    key = "sk-live-abcdefghijklmnop"
    install_client(_Client(_Resp(status_code=401, text=f"Incorrect API key provided: {key}")))

    res = await _query(api_key=key)

    assert res.ok is False
    assert key not in res.error_text
    assert "[REDACTED]" in res.error_text


@pytest.mark.asyncio
async def test_transport_error_becomes_failed_result(install_client):
    install_client(_Client(exc=httpx.ConnectError("connection refused")))

    res = await _query()

    assert res.ok is False
    assert res.status_code is None
    assert res.error_text == "connection refused"


@pytest.mark.asyncio
async def test_undecodable_body_becomes_failed_result(install_client):
    install_client(_Client(_Resp(body=ValueError("Expecting value"))))

    res = await _query()

    assert res.ok is False
    assert res.error_text == "Expecting value"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {},
        {"choices": []},
        {"choices": ["not a dict"]},
        {"choices": [{"message": None}]},
        {"choices": [{"message": {"content": 42}}]},
        ["unexpected"],
    ],
)
async def test_unexpected_shape_has_no_content(install_client, body):
    install_client(_Client(_Resp(body=body)))

    res = await _query()

    assert res.ok is True
    assert res.content is None


class _HangingClient:
    def __init__(self):
        self.started = asyncio.Event()
        self.pending = None

    async def post(self, url, **kwargs):
        self.pending = asyncio.get_running_loop().create_future()
        self.started.set()
        return await self.pending


@pytest.mark.asyncio
async def test_cancelling_the_call_propagates(install_client):
    client = install_client(_HangingClient())

    task = asyncio.create_task(_query())
    await client.started.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task
    assert client.pending.cancelled()


@pytest.mark.asyncio
async def test_fallback_client_is_created_once_and_reused():
    completions.set_client(None)
    try:
        first = completions._get_client(5.0)
        second = completions._get_client(30.0)

        assert isinstance(first, httpx.AsyncClient)
        assert second is first
        assert first.timeout.read == 5.0
    finally:
        completions.set_client(None)
        await first.aclose()
