"""
解析服务模块 - 把托管站点页面链接解析为音频直链

包含页面提取模式、异常类型、解析服务以及对外的HTTP接口。
"""

from .errors import (
    AudioNotFoundError,
    ForbiddenHostError,
    InvalidUrlError,
    MissingParameterError,
    ResolverError,
    UpstreamFetchFailedError
)
from .service import ResolverService
from .server import create_app, run_resolver_server

__all__ = [
    "AudioNotFoundError",
    "ForbiddenHostError",
    "InvalidUrlError",
    "MissingParameterError",
    "ResolverError",
    "UpstreamFetchFailedError",
    "ResolverService",
    "create_app",
    "run_resolver_server"
]
