"""
健康检查接口：探活 + LLM 配置状态
"""

import structlog
from fastapi import APIRouter

from lazy_latex.config import get_settings
from lazy_latex.llm.client import ConfigurationError, LLMClient

router = APIRouter(tags=["健康检查"])
log = structlog.get_logger()


@router.get("/health")
async def health_check():
    """健康检查：只校验 LLM 配置是否完整，不发起网络请求"""
    settings = get_settings()
    status = {"status": "ok", "llm": "ok", "provider": settings.LLM_PROVIDER}

    try:
        LLMClient(settings).check_config()
    except ConfigurationError as e:
        status["llm"] = f"error: {e}"
        status["status"] = "degraded"
        log.warning("LLM 配置检查失败", error=str(e))

    return status
