"""
行处理流程：回车完成一行 → 扫描标记 → 生成 → 原子替换

流程：
1. on_change 收到带换行的修改，扫描刚完成的那一行
2. 有标记则作为独立 asyncio 任务调度 process_line，不阻塞编辑器
3. 数学标记（;;/;;;）合并为一次批量调用；任意内容标记（;;;;）逐个调用
4. 成功的结果一次性提交为单行原子编辑，期间持有重入保护

失败策略（不重试）：
- 配置错误：整行放弃，提示用户
- 批量调用失败：只丢弃数学标记，任意内容标记照常处理
- 单个任意内容标记失败：跳过该标记，其余照常（部分成功照样提交）

已知限制：生成期间文档再次变化不会取消请求，迟到的结果按区间写入当时的行内容。
"""

import asyncio
from collections.abc import Callable

import structlog

from lazy_latex.config import Settings, get_settings
from lazy_latex.editing.document import Document, Position
from lazy_latex.editing.guard import EditGuard
from lazy_latex.editing.replacement import (
    EditResult,
    PlanEntry,
    build_line_edit,
    output_delimiters,
    plan_entries,
    render_line,
)
from lazy_latex.llm.client import ConfigurationError, LLMError
from lazy_latex.llm.gateway import GenerationGateway
from lazy_latex.markers.scanner import scan
from lazy_latex.markers.schemas import DocumentKind, Marker
from lazy_latex.observability.error_report import friendly_error_message, log_llm_error
from lazy_latex.observability.metrics import LINE_EDIT_TOTAL, MARKER_TOTAL
from lazy_latex.services.context_window import context_before_line

log = structlog.get_logger()

Notifier = Callable[[str], None]


def _log_notifier(message: str) -> None:
    log.warning("用户提示", message=message)


class LineProcessor:
    """持有重入保护和生成网关的行处理器"""

    def __init__(
        self,
        gateway: GenerationGateway | None = None,
        settings: Settings | None = None,
        notify: Notifier | None = None,
        guard: EditGuard | None = None,
    ):
        self.settings = settings or get_settings()
        self.gateway = gateway or GenerationGateway(settings=self.settings)
        self.notify = notify or _log_notifier
        self.guard = guard or EditGuard()
        self._tasks: set[asyncio.Task] = set()

    # ── 事件入口 ──

    def attach(self, document: Document) -> Callable[[], None]:
        """订阅文档变更，返回取消订阅函数"""
        return document.subscribe(self.on_change)

    def on_change(
        self, document: Document, line_number: int, inserted_text: str
    ) -> asyncio.Task | None:
        """文档变更回调：只处理带换行的修改（即"完成了一行"）"""
        if self.guard.active:
            return None
        if not self.settings.AUTO_REPLACE:
            return None
        kind = DocumentKind.from_language_id(document.language_id)
        if kind is None or "\n" not in inserted_text:
            return None

        try:
            line_text = document.line_at(line_number)
        except IndexError as e:
            log.error("回车后读取行失败", line=line_number, error=str(e))
            return None

        markers = scan(line_text, kind)
        if not markers:
            log.debug("回车：无标记或注释行", line=line_number)
            return None

        log.debug(
            "回车：发现标记",
            line=line_number,
            markers=[f"{m.category.value}:{m.payload}" for m in markers],
        )
        return self.schedule(document, line_number, markers, original_line=line_text)

    def schedule(
        self,
        document: Document,
        line_number: int,
        markers: list[Marker],
        original_line: str | None = None,
    ) -> asyncio.Task:
        """把一行的处理作为独立任务调度（original_line 为扫描时的行快照）"""
        task = asyncio.get_running_loop().create_task(
            self.process_line(document, line_number, markers, original_line)
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.error("行处理异常", error=str(exc), exc_info=exc)

    async def drain(self) -> None:
        """等待所有已调度的行处理结束"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    # ── 核心流程 ──

    async def process_line(
        self,
        document: Document,
        line_number: int,
        markers: list[Marker] | None = None,
        original_line: str | None = None,
    ) -> EditResult | None:
        """处理一行中的所有标记，有替换时返回编辑结果

        original_line 是扫描 markers 时的行文本；提示词、独占行判断和原始输入注释
        都以它为准，未提供时才读取文档当前内容。
        """
        kind = DocumentKind.from_language_id(document.language_id)
        if kind is None:
            return None

        if original_line is None:
            original_line = document.line_at(line_number)
        if markers is None:
            markers = scan(original_line, kind)
        if not markers:
            return None

        for m in markers:
            MARKER_TOTAL.labels(category=m.category.value).inc()

        context = context_before_line(document.lines, line_number, self.settings.CONTEXT_LINES)

        try:
            entries = await self._generate_entries(
                document, line_number, markers, kind, context, original_line
            )
        except ConfigurationError as e:
            log_llm_error(e, "LLM 配置错误，放弃本行", self.settings, line=line_number)
            self.notify(friendly_error_message(e))
            return None

        if not entries:
            log.info("本行没有可用的生成结果", line=line_number)
            return None

        edit = build_line_edit(
            original_line,
            entries,
            output_delimiters(kind, self.settings),
            kind,
            self.settings.KEEP_ORIGINAL_COMMENT,
        )

        with self.guard.hold():
            document.apply_edit(line_number, edit)
        LINE_EDIT_TOTAL.inc()

        edited = render_line(original_line, edit)
        log.info("行替换完成", line=line_number, replacements=len(edit.replacements))
        return EditResult(edited_text=edited, is_multiline="\n" in edited)

    async def _generate_entries(
        self,
        document: Document,
        line_number: int,
        markers: list[Marker],
        kind: DocumentKind,
        context: str,
        original_line: str,
    ) -> list[PlanEntry]:
        math_markers = [m for m in markers if m.category.is_math]
        anything_markers = [m for m in markers if not m.category.is_math]
        entries: list[PlanEntry] = []

        # 1) 数学标记：一次批量调用
        if math_markers:
            descriptions = [m.payload.strip() for m in math_markers]
            try:
                outputs = await self.gateway.convert_batch(
                    descriptions,
                    context=context,
                    raw_line=original_line,
                    kind=kind,
                    project_root=document.project_root,
                )
            except LLMError as e:
                log_llm_error(e, "批量生成失败", self.settings, line=line_number)
                self.notify(friendly_error_message(e))
                outputs = []
            entries.extend(plan_entries(math_markers, outputs))

        # 2) 任意内容标记：逐个调用
        for m in anything_markers:
            instruction = m.payload.strip()
            if not instruction:
                continue
            try:
                generated = await self.gateway.insert_anything(
                    instruction,
                    context=context,
                    raw_line=original_line,
                    kind=kind,
                    project_root=document.project_root,
                )
            except LLMError as e:
                log_llm_error(e, "任意内容生成失败", self.settings, line=line_number)
                self.notify(friendly_error_message(e))
                continue
            entries.extend(plan_entries([m], [generated]))

        return entries

    # ── 手动选区 ──

    async def convert_selection(
        self, document: Document, start: Position, end: Position
    ) -> str | None:
        """把任意选中文本转换为单个 LaTeX 表达式并原样替换"""
        selected = document.get_text(start, end) if start != end else ""
        if not selected:
            self.notify("Lazy LaTeX：请先选中要转换的数学描述。")
            return None

        kind = DocumentKind.from_language_id(document.language_id) or DocumentKind.LATEX
        context = context_before_line(document.lines, start.line, self.settings.CONTEXT_LINES)

        try:
            latex = await self.gateway.convert_expression(
                selected, context=context, kind=kind, project_root=document.project_root
            )
        except (ConfigurationError, LLMError) as e:
            log_llm_error(e, "选区转换失败", self.settings, line=start.line)
            self.notify(friendly_error_message(e))
            return None

        latex = (latex or "").strip()
        if not latex:
            self.notify("Lazy LaTeX：LLM 返回了空结果。")
            return None

        with self.guard.hold():
            document.replace_range(start, end, latex)
        return latex
