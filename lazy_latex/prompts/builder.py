"""
Prompt 组装：基础规则 + 双来源额外指令 + 上文窗口 + 当前行 → (system, user)

额外指令有明确优先级：项目级（.lazy-latex.md）在前并标注为高优先级，
用户级（PROMPT_EXTRA）在后。上文和当前行放在用户消息中任务内容之前，
各自用三引号围起并注明"仅供参考，不要改写"。
"""

from dataclasses import dataclass

from lazy_latex.markers.schemas import DocumentKind
from lazy_latex.prompts import templates as t
from lazy_latex.prompts.templates import PromptTask


@dataclass(frozen=True)
class PromptPair:
    """一次生成调用所需的两段 Prompt"""

    system_prompt: str
    user_prompt: str


def _document_name(kind: DocumentKind) -> str:
    return t.DOCUMENT_NAMES.get(kind.value, kind.value)


def _base_system_prompt(task: PromptTask, kind: DocumentKind) -> str:
    if task is PromptTask.EXPRESSION:
        return t.EXPRESSION_SYSTEM_PROMPT
    if task is PromptTask.BATCH:
        return t.BATCH_SYSTEM_PROMPT
    return t.ANYTHING_SYSTEM_PROMPT.format(document_name=_document_name(kind))


def merge_instructions(
    system_prompt: str,
    high_priority: str | None = None,
    low_priority: str | None = None,
) -> str:
    """把两个来源的额外指令追加到 System Prompt 末尾（高优先级在前）"""
    high = (high_priority or "").strip()
    low = (low_priority or "").strip()
    if not high and not low:
        return system_prompt

    parts = [system_prompt, "", t.EXTRA_INSTRUCTIONS_HEADER]
    if high:
        parts += ["", t.EXTRA_INSTRUCTIONS_HIGH.format(text=high)]
    if low:
        parts += ["", t.EXTRA_INSTRUCTIONS_LOW.format(text=low)]
    return "\n".join(parts).rstrip()


def format_numbered_items(payloads: list[str]) -> str:
    """批量模式的 1 起编号列表"""
    return "\n".join(f"{idx}. {payload}" for idx, payload in enumerate(payloads, start=1))


def _task_block(task: PromptTask, payloads: list[str]) -> str:
    if task is PromptTask.BATCH:
        return t.BATCH_USER_PROMPT.format(
            count=len(payloads),
            items=format_numbered_items(payloads),
        )
    text = payloads[0] if payloads else ""
    if task is PromptTask.EXPRESSION:
        return t.EXPRESSION_USER_PROMPT.format(text=text)
    return t.ANYTHING_USER_PROMPT.format(text=text)


def assemble_prompt(
    task: PromptTask,
    payloads: list[str],
    high_priority: str | None = None,
    low_priority: str | None = None,
    preceding_context: str | None = None,
    raw_current_line: str | None = None,
    kind: DocumentKind = DocumentKind.LATEX,
) -> PromptPair:
    """
    组装一次生成调用的 Prompt。

    Args:
        task: 任务类型，决定基础规则和任务块格式
        payloads: 标记内容；EXPRESSION / ANYTHING 只取第一项，BATCH 全部编号
        high_priority: 项目级额外指令
        low_priority: 用户级额外指令
        preceding_context: 上文窗口（空白时省略）
        raw_current_line: 含标记的原始当前行（空白时省略）
        kind: 文档类型，用于上文说明和 ANYTHING 规则
    """
    system_prompt = merge_instructions(
        _base_system_prompt(task, kind), high_priority, low_priority
    )

    blocks: list[str] = []
    if preceding_context and preceding_context.strip():
        blocks.append(
            t.CONTEXT_BLOCK.format(
                document_name=_document_name(kind), context=preceding_context
            )
        )
    if raw_current_line and raw_current_line.strip():
        blocks.append(t.CURRENT_LINE_BLOCK.format(line=raw_current_line))
    blocks.append(_task_block(task, payloads))

    return PromptPair(system_prompt=system_prompt, user_prompt="\n\n".join(blocks).strip())
