"""
全局配置模块：通过 pydantic-settings 读取 .env 环境变量

.env 即"用户级"持久化配置；项目级指令文件（.lazy-latex.md）不在这里读，
见 services/instruction_service.py。
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用全局配置，从 .env 文件加载"""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── LLM ──
    LLM_PROVIDER: str = "openai"  # openai | gemini（OpenAI 协议兼容） | anthropic
    LLM_ENDPOINT: str = "https://api.openai.com/v1/chat/completions"  # 完整请求地址
    LLM_API_KEY: str = ""  # API Key，为空时拒绝发起请求
    LLM_MODEL: str = "gpt-4o-mini"
    LLM_TIMEOUT: int = 60  # 单次调用超时（秒），不重试
    LLM_MAX_TOKENS: int = 512  # anthropic 协议必填

    # ── 自动替换 ──
    AUTO_REPLACE: bool = True  # 回车完成一行后自动处理标记
    CONTEXT_LINES: int = 50  # 上文窗口行数，<= 0 关闭
    KEEP_ORIGINAL_COMMENT: bool = False  # 在被编辑行上方保留原始输入（注释形式）

    # ── LaTeX 输出定界符（Markdown 固定为 $ / $$） ──
    LATEX_INLINE_STYLE: Literal["dollar", "paren"] = "dollar"  # $...$ | \(...\)
    LATEX_DISPLAY_STYLE: Literal["brackets", "dollars"] = "brackets"  # \[...\] | $$...$$

    # ── 额外指令 ──
    PROMPT_EXTRA: str = ""  # 用户级指令（低优先级）
    PROJECT_PROMPT_FILE: str = ".lazy-latex.md"  # 项目根目录下的项目级指令文件（高优先级）

    # ── 应用 ──
    ENV: str = "development"  # development | production
    LOG_LEVEL: str = "INFO"
    APP_NAME: str = "lazy-latex"
    APP_PORT: int = 8000

    @field_validator("LLM_PROVIDER")
    @classmethod
    def _normalize_provider(cls, value: str) -> str:
        """供应商标识统一小写，空值回落到 openai"""
        return (value or "openai").strip().lower()

    @field_validator("CONTEXT_LINES")
    @classmethod
    def _clamp_context_lines(cls, value: int) -> int:
        """负数等价于 0（关闭上文窗口）"""
        return max(0, value)


@lru_cache
def get_settings() -> Settings:
    """单例获取配置（带缓存）"""
    return Settings()
