"""
生成网关：把三类生成任务组装成 Prompt，交给 LLMClient

- convert_expression：手动选区，单个表达式
- convert_batch：一行中所有数学标记合并成一次调用，输出按行拆回
- insert_anything：单个 ;;;;...;;;; 指令，每个标记各一次调用

额外指令（项目级 + 用户级）在每次调用时重新读取。
"""

import structlog

from lazy_latex.config import Settings, get_settings
from lazy_latex.llm.client import LLMClient
from lazy_latex.llm.demux import demultiplex
from lazy_latex.markers.schemas import DocumentKind
from lazy_latex.observability.metrics import LLM_CALL_TOTAL
from lazy_latex.prompts.builder import PromptPair, assemble_prompt
from lazy_latex.prompts.templates import PromptTask
from lazy_latex.services.instruction_service import load_instruction_sources

log = structlog.get_logger()


class GenerationGateway:
    """任务级生成入口"""

    def __init__(self, client: LLMClient | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.client = client or LLMClient(self.settings)

    async def _prompt(
        self,
        task: PromptTask,
        payloads: list[str],
        context: str,
        raw_line: str,
        kind: DocumentKind,
        project_root: str | None,
    ) -> PromptPair:
        sources = await load_instruction_sources(project_root, self.settings)
        return assemble_prompt(
            task,
            payloads,
            high_priority=sources.project,
            low_priority=sources.user,
            preceding_context=context,
            raw_current_line=raw_line,
            kind=kind,
        )

    async def _call(self, task: PromptTask, prompt: PromptPair) -> str:
        try:
            text = await self.client.generate(prompt.system_prompt, prompt.user_prompt)
        except Exception:
            LLM_CALL_TOTAL.labels(task=task.value, status="error").inc()
            raise
        LLM_CALL_TOTAL.labels(task=task.value, status="success").inc()
        return text

    async def convert_expression(
        self,
        text: str,
        context: str = "",
        kind: DocumentKind = DocumentKind.LATEX,
        project_root: str | None = None,
    ) -> str:
        """自然语言 / 不规范 LaTeX → 单个 LaTeX 表达式（不带定界符）"""
        prompt = await self._prompt(PromptTask.EXPRESSION, [text], context, "", kind, project_root)
        return await self._call(PromptTask.EXPRESSION, prompt)

    async def convert_batch(
        self,
        descriptions: list[str],
        context: str = "",
        raw_line: str = "",
        kind: DocumentKind = DocumentKind.LATEX,
        project_root: str | None = None,
    ) -> list[str]:
        """一次调用转换多个描述，返回与输入等长的列表（缺失项为空串）"""
        if not descriptions:
            return []

        prompt = await self._prompt(
            PromptTask.BATCH, descriptions, context, raw_line, kind, project_root
        )
        raw = await self._call(PromptTask.BATCH, prompt)
        outputs = demultiplex(raw, len(descriptions))

        missing = sum(1 for item in outputs if not item)
        if missing:
            log.warning("批量响应行数不足", expected=len(descriptions), missing=missing)
        return outputs

    async def insert_anything(
        self,
        instruction: str,
        context: str = "",
        raw_line: str = "",
        kind: DocumentKind = DocumentKind.LATEX,
        project_root: str | None = None,
    ) -> str:
        """按指令生成任意内容，原样插入文档"""
        prompt = await self._prompt(
            PromptTask.ANYTHING, [instruction], context, raw_line, kind, project_root
        )
        return await self._call(PromptTask.ANYTHING, prompt)
