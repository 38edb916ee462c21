"""
编辑请求中间件：按桥接操作（行处理 / 选区转换）打标签、注入 trace_id、记录耗时

只跟踪 OPERATIONS 中的路由，/health 与 /metrics 直接放行。
language_id / line_number 由端点在解析请求体后绑定到同一日志上下文。
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from lazy_latex.observability.metrics import REQUEST_DURATION, REQUEST_TOTAL

log = structlog.get_logger()

# 路径 → 操作名（指标标签）
OPERATIONS = {
    "/lines/process": "line",
    "/selection/convert": "selection",
}


class EditRequestMiddleware(BaseHTTPMiddleware):
    """编辑请求的日志上下文 + 按操作统计的请求指标"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        operation = OPERATIONS.get(request.url.path)
        if operation is None:
            return await call_next(request)

        # 编辑器插件可通过 X-Trace-ID 透传，把插件侧日志和服务端日志串起来
        trace_id = request.headers.get("X-Trace-ID") or str(uuid.uuid4())
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(trace_id=trace_id, operation=operation)

        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        status = str(response.status_code)
        REQUEST_TOTAL.labels(operation=operation, status_code=status).inc()
        REQUEST_DURATION.labels(operation=operation).observe(duration_ms)
        log.info("编辑请求结束", status_code=response.status_code, duration_ms=int(duration_ms))

        response.headers["X-Trace-ID"] = trace_id
        return response
