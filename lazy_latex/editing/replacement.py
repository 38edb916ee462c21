"""
替换引擎：把生成结果写回原始行

- 计划项（PlanEntry）与标记一一对应、顺序一致；生成结果 strip 后为空的标记不产生计划项，
  原文保持不动
- 行内公式用行内定界符包裹；公式块用块定界符包裹并独占一行
  （标记前已有非空白文字时先插入换行）；任意内容原样插入
- 所有替换按起始下标从右到左应用，前面的下标不会因后面的替换失效
- 可选：在行首以注释形式保留原始输入，与替换在同一次原子编辑中提交
"""

from collections.abc import Sequence
from dataclasses import dataclass

from lazy_latex.config import Settings
from lazy_latex.markers.schemas import DocumentKind, Marker, MarkerCategory

ORIGINAL_COMMENT_TAG = "[lazy-latex input]"


@dataclass(frozen=True)
class Delimiters:
    open: str
    close: str


@dataclass(frozen=True)
class OutputDelimiters:
    """行内 / 公式块输出定界符"""

    inline: Delimiters
    display: Delimiters


MARKDOWN_DELIMITERS = OutputDelimiters(
    inline=Delimiters("$", "$"),
    display=Delimiters("$$", "$$"),
)

_LATEX_INLINE = {
    "dollar": Delimiters("$", "$"),
    "paren": Delimiters("\\(", "\\)"),
}
_LATEX_DISPLAY = {
    "brackets": Delimiters("\\[", "\\]"),
    "dollars": Delimiters("$$", "$$"),
}


def output_delimiters(kind: DocumentKind, settings: Settings) -> OutputDelimiters:
    """Markdown 固定 $ / $$；LaTeX 由配置选择"""
    if kind is DocumentKind.MARKDOWN:
        return MARKDOWN_DELIMITERS
    return OutputDelimiters(
        inline=_LATEX_INLINE[settings.LATEX_INLINE_STYLE],
        display=_LATEX_DISPLAY[settings.LATEX_DISPLAY_STYLE],
    )


@dataclass(frozen=True)
class PlanEntry:
    """待替换项：标记区间 + 生成的原始文本（未包裹）"""

    start: int
    end: int
    category: MarkerCategory
    text: str


@dataclass(frozen=True)
class TextReplacement:
    """落到文本缓冲区的区间替换（已包裹）"""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class LineEdit:
    """针对单行的一次原子编辑"""

    replacements: tuple[TextReplacement, ...]
    leading_insert: str = ""  # 插入到行首（第 0 列）的文本，含结尾换行

    @property
    def is_empty(self) -> bool:
        return not self.replacements and not self.leading_insert


@dataclass(frozen=True)
class EditResult:
    edited_text: str
    is_multiline: bool


def plan_entries(markers: Sequence[Marker], generated: Sequence[str]) -> list[PlanEntry]:
    """按位置配对标记与生成结果，丢弃空结果"""
    entries: list[PlanEntry] = []
    for marker, text in zip(markers, generated):
        text = (text or "").strip()
        if not text:
            continue
        entries.append(PlanEntry(marker.start, marker.end, marker.category, text))
    return entries


def wrap_entry(entry: PlanEntry, original_line: str, delimiters: OutputDelimiters) -> str:
    """按类别包裹生成文本"""
    if entry.category is MarkerCategory.INLINE:
        d = delimiters.inline
        return f"{d.open}{entry.text}{d.close}"

    if entry.category is MarkerCategory.DISPLAY:
        d = delimiters.display
        block = f"{d.open}\n{entry.text}\n{d.close}\n"
        # 公式块独占一行：前面已有正文时先换行
        if original_line[: entry.start].strip():
            block = "\n" + block
        return block

    return entry.text


def original_line_comment(line: str, kind: DocumentKind) -> str:
    """原始输入的注释形式（不含换行）"""
    if kind is DocumentKind.MARKDOWN:
        return f"<!-- {ORIGINAL_COMMENT_TAG} {line} -->"
    return f"% {ORIGINAL_COMMENT_TAG} {line}"


def build_line_edit(
    original_line: str,
    entries: Sequence[PlanEntry],
    delimiters: OutputDelimiters,
    kind: DocumentKind,
    keep_original_comment: bool = False,
) -> LineEdit:
    """计划项 → 单行原子编辑（替换按起始下标降序排列）"""
    ordered = sorted(entries, key=lambda e: e.start, reverse=True)
    replacements = tuple(
        TextReplacement(e.start, e.end, wrap_entry(e, original_line, delimiters))
        for e in ordered
    )

    leading = ""
    if keep_original_comment and replacements and original_line.strip():
        leading = original_line_comment(original_line, kind) + "\n"

    return LineEdit(replacements=replacements, leading_insert=leading)


def render_line(line_text: str, edit: LineEdit) -> str:
    """把编辑按区间应用到给定行文本上（从右到左）"""
    text = line_text
    for r in sorted(edit.replacements, key=lambda r: r.start, reverse=True):
        text = text[: r.start] + r.text + text[r.end :]
    return edit.leading_insert + text


def apply_replacements(
    original_line: str,
    entries: Sequence[PlanEntry],
    delimiters: OutputDelimiters,
    kind: DocumentKind,
    keep_original_comment: bool = False,
) -> EditResult:
    """替换引擎入口：原始行 + 计划项 → 编辑后的文本（可能跨多行）"""
    edit = build_line_edit(original_line, entries, delimiters, kind, keep_original_comment)
    edited = render_line(original_line, edit)
    return EditResult(edited_text=edited, is_multiline="\n" in edited)
