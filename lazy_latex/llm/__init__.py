"""
LLM 调用层：LiteLLM 客户端 + 任务级生成网关 + 批量响应拆分
"""

from lazy_latex.llm.client import ConfigurationError, LLMClient, LLMError
from lazy_latex.llm.demux import demultiplex
from lazy_latex.llm.gateway import GenerationGateway

__all__ = ["ConfigurationError", "GenerationGateway", "LLMClient", "LLMError", "demultiplex"]
