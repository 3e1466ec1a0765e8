"""
解析客户端测试

启动一个本地 aiohttp 服务模拟 /resolve 端点，验证成功响应、错误状态和缺失字段的处理。
"""

import pytest
from aiohttp import web

from gasmplaylist.core.interfaces import ResolutionError
from gasmplaylist.playlist.resolver_client import HttpResolverClient


PAGE_URL = "https://soundgasm.net/u/a/b"


@pytest.fixture()
def responses():
    """页面链接 -> (状态码, 响应体)"""
    return {}


@pytest.fixture()
async def resolver_server(aiohttp_server, responses):
    received = []

    async def handle_resolve(request: web.Request) -> web.Response:
        url = request.query.get("url")
        received.append(url)
        status, body = responses.get(url, (200, {"audioUrl": "https://m.example/x.m4a", "title": "X"}))
        return web.json_response(body, status=status)

    app = web.Application()
    app.router.add_get("/resolve", handle_resolve)
    server = await aiohttp_server(app)
    server.received = received
    return server


def _client(server) -> HttpResolverClient:
    return HttpResolverClient(str(server.make_url("/")), timeout=5)


@pytest.mark.asyncio
async def test_resolve_success(resolver_server):
    resolved = await _client(resolver_server).resolve(PAGE_URL)

    assert resolved.audio_url == "https://m.example/x.m4a"
    assert resolved.title == "X"
    assert resolver_server.received == [PAGE_URL]


@pytest.mark.asyncio
async def test_resolve_without_title(resolver_server, responses):
    responses[PAGE_URL] = (200, {"audioUrl": "https://m.example/y.m4a", "title": None})

    resolved = await _client(resolver_server).resolve(PAGE_URL)

    assert resolved.title is None


@pytest.mark.asyncio
async def test_resolve_error_status(resolver_server, responses):
    responses[PAGE_URL] = (422, {"error": "Could not find an audio URL on that page."})

    with pytest.raises(ResolutionError) as exc_info:
        await _client(resolver_server).resolve(PAGE_URL)

    assert exc_info.value.status == 422
    assert exc_info.value.page_url == PAGE_URL
    assert PAGE_URL in str(exc_info.value)


@pytest.mark.asyncio
async def test_resolve_missing_audio_url(resolver_server, responses):
    responses[PAGE_URL] = (200, {"title": "No audio"})

    with pytest.raises(ResolutionError):
        await _client(resolver_server).resolve(PAGE_URL)


@pytest.mark.asyncio
async def test_resolve_unreachable_service():
    client = HttpResolverClient("http://127.0.0.1:1", timeout=2)

    with pytest.raises(ResolutionError) as exc_info:
        await client.resolve(PAGE_URL)

    assert exc_info.value.status is None


def test_base_url_trailing_slash_is_stripped():
    assert HttpResolverClient("http://localhost:8787/").base_url == "http://localhost:8787"
