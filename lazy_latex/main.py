"""
FastAPI 应用主入口：编辑器插件的 HTTP 桥接服务
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from prometheus_client import make_asgi_app

from lazy_latex import __version__
from lazy_latex.config import get_settings
from lazy_latex.llm.client import ConfigurationError, LLMClient
from lazy_latex.observability.logging_config import setup_logging
from lazy_latex.observability.request_middleware import EditRequestMiddleware

settings = get_settings()

# 初始化日志（在 import 时就生效）
setup_logging(env=settings.ENV, level=settings.LOG_LEVEL)
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(application: FastAPI):
    """应用生命周期：启动时检查 LLM 配置（不阻止启动，请求时再报错）"""
    log.info("应用启动", env=settings.ENV, app=settings.APP_NAME)

    try:
        LLMClient(settings).check_config()
        log.info("LLM 配置正常", provider=settings.LLM_PROVIDER, model=settings.LLM_MODEL)
    except ConfigurationError as e:
        log.warning("LLM 配置不完整，请求将失败", error=str(e))

    yield

    log.info("应用关闭")


app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    lifespan=lifespan,
)

# ── 中间件 ──
app.add_middleware(EditRequestMiddleware)

# ── Prometheus 指标端点 ──
metrics_app = make_asgi_app()
app.mount("/metrics", metrics_app)

# ── 路由注册 ──
from lazy_latex.api.health import router as health_router  # noqa: E402
from lazy_latex.api.lines import router as lines_router  # noqa: E402

app.include_router(health_router)
app.include_router(lines_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lazy_latex.main:app", host="127.0.0.1", port=settings.APP_PORT, reload=True)
