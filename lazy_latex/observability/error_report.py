"""
LLM 错误上报：详细日志 + 面向用户的提示文案

按 HTTP 状态码归类：
- 401/403 → 认证失败
- 404     → 端点或模型配置错误
- 429     → 限流
- 5xx     → 供应商服务端错误
- 其他    → 通用失败（包括响应结构不符）
"""

from enum import Enum

import structlog

from lazy_latex.config import Settings
from lazy_latex.llm.client import ConfigurationError
from lazy_latex.observability.metrics import ERROR_TOTAL

log = structlog.get_logger()

# 日志中原始响应体的最大长度
_MAX_DETAILS_CHARS = 2000


class ErrorCategory(str, Enum):
    CONFIGURATION = "configuration"
    AUTH = "auth"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    GENERIC = "generic"


_FRIENDLY_MESSAGES = {
    ErrorCategory.CONFIGURATION: "Lazy LaTeX：LLM 配置不完整（{detail}）。",
    ErrorCategory.AUTH: "Lazy LaTeX：LLM 认证失败，请检查 API Key 和供应商设置。",
    ErrorCategory.NOT_FOUND: "Lazy LaTeX：LLM 返回 404，通常是端点地址或模型名称有误。",
    ErrorCategory.RATE_LIMIT: "Lazy LaTeX：LLM 供应商限流，请稍后再试。",
    ErrorCategory.SERVER: "Lazy LaTeX：LLM 供应商服务端错误，请稍后再试。",
    ErrorCategory.GENERIC: "Lazy LaTeX：调用 LLM 或解析响应失败，请检查供应商设置。",
}


def classify_status(status: int | None) -> ErrorCategory:
    """HTTP 状态码 → 错误类别"""
    if status in (401, 403):
        return ErrorCategory.AUTH
    if status == 404:
        return ErrorCategory.NOT_FOUND
    if status == 429:
        return ErrorCategory.RATE_LIMIT
    if status is not None and 500 <= status < 600:
        return ErrorCategory.SERVER
    return ErrorCategory.GENERIC


def classify_error(err: Exception) -> ErrorCategory:
    if isinstance(err, ConfigurationError):
        return ErrorCategory.CONFIGURATION
    status = getattr(err, "status", None)
    return classify_status(status if isinstance(status, int) else None)


def friendly_error_message(err: Exception) -> str:
    """给用户看的一句话提示"""
    category = classify_error(err)
    return _FRIENDLY_MESSAGES[category].format(detail=str(err))


def log_llm_error(err: Exception, context_message: str, settings: Settings, **fields) -> None:
    """记录一次 LLM 失败的完整诊断信息（原始响应体截断）"""
    category = classify_error(err)
    ERROR_TOTAL.labels(error_type=category.value).inc()

    details = getattr(err, "details", None)
    if details is not None and not isinstance(details, str):
        details = str(details)

    log.error(
        context_message,
        category=category.value,
        provider_setting=settings.LLM_PROVIDER,
        endpoint=settings.LLM_ENDPOINT,
        model=settings.LLM_MODEL,
        http_status=getattr(err, "status", None),
        error_provider=getattr(err, "provider", None),
        error=str(err) or "<no message>",
        details=details[:_MAX_DETAILS_CHARS] if details else None,
        **fields,
    )
