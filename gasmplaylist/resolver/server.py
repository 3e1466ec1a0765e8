"""
解析服务HTTP接口 - 单一端点 GET /resolve?url=<页面链接>

所有响应（包括错误响应）都带有跨域头，OPTIONS 预检请求直接返回空响应。
其他方法或路径一律返回 404。
"""

import logging
from typing import Optional

from aiohttp import web

from .errors import ResolverError
from .service import ResolverService


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Max-Age": "86400"
}

RESOLVER_SERVICE_KEY = web.AppKey("resolver_service", ResolverService)

logger = logging.getLogger("gasmplaylist.resolver.server")


@web.middleware
async def cors_middleware(request: web.Request, handler) -> web.StreamResponse:
    """处理预检请求，把未匹配的请求统一为404，并为每个响应加上跨域头"""
    if request.method == "OPTIONS":
        return web.Response(headers=CORS_HEADERS)

    try:
        response = await handler(request)
    except web.HTTPException as e:
        if e.status not in (404, 405):
            e.headers.update(CORS_HEADERS)
            raise
        logger.debug(f"未知请求: {request.method} {request.path}")
        response = web.Response(text="Not found", status=404)

    response.headers.update(CORS_HEADERS)
    return response


async def handle_resolve(request: web.Request) -> web.Response:
    """GET /resolve 处理器"""
    service = request.app[RESOLVER_SERVICE_KEY]
    page_url = request.query.get("url")

    try:
        resolved = await service.resolve(page_url)
    except ResolverError as e:
        logger.info(f"解析失败 ({e.status}) - {page_url}: {e.message}")
        return web.json_response(e.to_dict(), status=e.status)

    return web.json_response(resolved.to_dict())


def create_app(service: Optional[ResolverService] = None) -> web.Application:
    """
    创建解析服务的 aiohttp 应用

    Args:
        service: 解析服务实例，为 None 时使用默认配置

    Returns:
        aiohttp 应用
    """
    app = web.Application(middlewares=[cors_middleware])
    app[RESOLVER_SERVICE_KEY] = service or ResolverService()
    app.add_routes([
        web.get('/resolve', handle_resolve, allow_head=False),
    ])
    return app


def run_resolver_server(config) -> None:
    """
    运行解析服务（阻塞式）

    Args:
        config: 配置管理器
    """
    service = ResolverService(
        allowed_domain=config.get_resolver_allowed_domain(),
        user_agent=config.get_resolver_user_agent(),
        timeout=config.get_resolver_timeout()
    )
    host = config.get_resolver_host()
    port = config.get_resolver_port()

    logger.info(f"🚀 解析服务启动中 - http://{host}:{port}/resolve")
    web.run_app(create_app(service), host=host, port=port, print=None)
