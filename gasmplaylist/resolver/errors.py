"""
解析服务异常 - 每种失败对应一个HTTP状态码

所有异常都可以恢复：调用方收到错误响应后继续处理下一个链接。
"""

from typing import Any, Dict, Optional


class ResolverError(Exception):
    """
    解析服务异常基类

    Attributes:
        status: 返回给调用方的HTTP状态码
        message: 返回给调用方的错误描述
    """
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        """转换为错误响应体"""
        return {"error": self.message}


class MissingParameterError(ResolverError):
    """缺少 url 查询参数"""
    status = 400

    def __init__(self, message: str = "Missing url param. Use /resolve?url=<soundgasm-page-url>"):
        super().__init__(message)


class InvalidUrlError(ResolverError):
    """url 参数不是合法的绝对URL"""
    status = 400

    def __init__(self, message: str = "Invalid url param"):
        super().__init__(message)


class ForbiddenHostError(ResolverError):
    """url 的主机不在允许的域名下"""
    status = 403

    def __init__(self, allowed_domain: str):
        super().__init__(f"Only {allowed_domain} URLs are allowed by this resolver.")
        self.allowed_domain = allowed_domain


class UpstreamFetchFailedError(ResolverError):
    """抓取目标页面失败"""
    status = 502

    def __init__(self, upstream_status: Optional[int], message: str = "Failed to fetch page"):
        super().__init__(message)
        self.upstream_status = upstream_status  # 网络错误时为None

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, "status": self.upstream_status}


class AudioNotFoundError(ResolverError):
    """页面中找不到音频链接"""
    status = 422

    def __init__(self, message: str = "Could not find an audio URL on that page."):
        super().__init__(message)
