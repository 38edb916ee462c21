"""
轻量 LLM 客户端：经 LiteLLM 直连配置的供应商

按 LLM_PROVIDER 分派到不同的线协议（OpenAI 兼容 / Anthropic），
上层只依赖 generate(system_prompt, user_prompt) -> str。
每个请求只尝试一次，不做重试；失败统一转成 LLMError，保留供应商、状态码和原始响应体。
"""

import time
from dataclasses import dataclass, field

import structlog
from litellm import acompletion
from litellm.exceptions import (
    APIConnectionError,
    APIError,
    AuthenticationError,
    RateLimitError,
    Timeout,
)

from lazy_latex.config import Settings, get_settings
from lazy_latex.observability.metrics import LLM_CALL_DURATION

log = structlog.get_logger()


class ConfigurationError(Exception):
    """缺少 API Key / 端点 / 模型，或供应商不受支持；在发起任何网络请求前抛出"""


class LLMError(Exception):
    """LLM 调用失败的应用级异常（传输错误、非 2xx 响应、响应结构不符）"""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        status: int | None = None,
        details: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status = status
        self.details = details
        self.cause = cause


@dataclass(frozen=True)
class ProviderRoute:
    """供应商标识 → LiteLLM 调用方式"""

    model_prefix: str  # LiteLLM 模型前缀：{prefix}/{model}
    endpoint_suffix: str | None = None  # 从完整端点中去掉的后缀，得到 api_base
    send_max_tokens: bool = False  # 协议要求必须带 max_tokens
    options: dict = field(default_factory=dict)


# 封闭集合：新增供应商在此登记
PROVIDER_ROUTES: dict[str, ProviderRoute] = {
    "openai": ProviderRoute("openai", "/chat/completions", options={"temperature": 0.0}),
    # Gemini 走 OpenAI 兼容端点
    "gemini": ProviderRoute("openai", "/chat/completions", options={"temperature": 0.0}),
    "anthropic": ProviderRoute("anthropic", send_max_tokens=True),
}


def _api_base(endpoint: str, route: ProviderRoute) -> str:
    base = endpoint.strip().rstrip("/")
    if route.endpoint_suffix and base.endswith(route.endpoint_suffix):
        base = base[: -len(route.endpoint_suffix)]
    return base


def _error_details(e: Exception) -> str:
    """尽量取出供应商返回的原始响应体"""
    response = getattr(e, "response", None)
    text = getattr(response, "text", None)
    if isinstance(text, str) and text:
        return text
    return getattr(e, "message", None) or str(e)


class LLMClient:
    """统一 LLM 调用入口"""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    @property
    def provider(self) -> str:
        return self.settings.LLM_PROVIDER

    def check_config(self) -> ProviderRoute:
        """校验凭据 / 端点 / 模型 / 供应商，失败抛 ConfigurationError"""
        s = self.settings
        if not s.LLM_API_KEY:
            raise ConfigurationError("未配置 API Key，请设置 LLM_API_KEY")
        if not s.LLM_ENDPOINT or not s.LLM_MODEL:
            raise ConfigurationError("未配置 LLM 端点或模型，请设置 LLM_ENDPOINT / LLM_MODEL")
        route = PROVIDER_ROUTES.get(self.provider)
        if route is None:
            raise ConfigurationError(f"不支持的 LLM 供应商: {self.provider}")
        return route

    def _build_kwargs(self, route: ProviderRoute, system_prompt: str, user_prompt: str) -> dict:
        s = self.settings
        kwargs: dict = {
            "model": f"{route.model_prefix}/{s.LLM_MODEL}",
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "api_key": s.LLM_API_KEY,
            "api_base": _api_base(s.LLM_ENDPOINT, route),
            "timeout": s.LLM_TIMEOUT,
            "num_retries": 0,
            **route.options,
        }
        if route.send_max_tokens:
            kwargs["max_tokens"] = s.LLM_MAX_TOKENS
        return kwargs

    async def generate(self, system_prompt: str, user_prompt: str) -> str:
        """
        发起一次生成调用，返回去除首尾空白的文本。

        Raises:
            ConfigurationError: 配置缺失（未发起请求）
            LLMError: 请求失败或响应中没有文本
        """
        route = self.check_config()
        provider = self.provider
        kwargs = self._build_kwargs(route, system_prompt, user_prompt)

        log.debug("LLM 调用开始", provider=provider, model=kwargs["model"])
        start = time.monotonic()

        try:
            response = await acompletion(**kwargs)
        except AuthenticationError as e:
            log.error("LLM 认证失败", provider=provider, error=str(e))
            raise self._wrap(e, "LLM 认证失败") from e
        except RateLimitError as e:
            log.warning("LLM 限流", provider=provider, error=str(e))
            raise self._wrap(e, "LLM 请求限流") from e
        except Timeout as e:
            log.warning("LLM 调用超时", provider=provider, timeout=self.settings.LLM_TIMEOUT)
            raise self._wrap(e, f"LLM 调用超时（{self.settings.LLM_TIMEOUT}s）") from e
        except APIConnectionError as e:
            log.error("LLM 连接失败", provider=provider, error=str(e))
            raise self._wrap(e, "LLM 服务连接失败") from e
        except APIError as e:
            log.error("LLM API 错误", provider=provider, error=str(e))
            raise self._wrap(e, "LLM API 返回错误") from e
        except Exception as e:
            log.error("LLM 未知异常", provider=provider, error=str(e), exc_info=True)
            raise self._wrap(e, "LLM 调用异常") from e
        finally:
            LLM_CALL_DURATION.labels(provider=provider).observe(
                (time.monotonic() - start) * 1000
            )

        content = self._extract_content(response)
        if not isinstance(content, str) or not content.strip():
            log.error("LLM 响应结构异常", provider=provider, response_preview=str(response)[:200])
            raise LLMError(
                "LLM 响应中没有文本内容",
                provider=provider,
                details=str(response)[:2000],
            )

        log.debug("LLM 调用完成", provider=provider, chars=len(content))
        return content.strip()

    def _wrap(self, e: Exception, message: str) -> LLMError:
        status = getattr(e, "status_code", None)
        return LLMError(
            f"{message} ({self.provider}): {status or '-'}",
            provider=self.provider,
            status=status if isinstance(status, int) else None,
            details=_error_details(e),
            cause=e,
        )

    @staticmethod
    def _extract_content(response) -> str | None:
        try:
            return response.choices[0].message.content
        except (AttributeError, IndexError, KeyError, TypeError):
            return None
