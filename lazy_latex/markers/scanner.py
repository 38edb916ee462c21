"""
标记扫描器：在单行文本中查找 ;;...;; / ;;;...;;; / ;;;;...;;;; 标记

规则：
- 纯注释行直接跳过（LaTeX: 去空白后以 % 开头；Markdown: 整行是 <!-- ... -->）
- 连续 2/3/4 个分号是候选起始符，向后寻找长度完全相同的连续分号作为结束符
- 中途遇到长度不同的分号串只跳过，不结束当前标记
- 找不到结束符则放弃该起始符，从其后继续扫描
- 1 个或 >= 5 个连续分号永远不构成标记（即使包含 2/3/4 长度的子串）
- 标记之间不嵌套、不重叠，输出顺序即文档顺序
"""

from lazy_latex.markers.schemas import (
    MARKER_CHAR,
    RUN_LENGTH_CATEGORIES,
    DocumentKind,
    Marker,
)

_LATEX_COMMENT = "%"
_MARKDOWN_COMMENT_OPEN = "<!--"
_MARKDOWN_COMMENT_CLOSE = "-->"


def is_comment_line(line: str, kind: DocumentKind) -> bool:
    """整行是否为该文档类型的注释"""
    trimmed = line.strip()
    if kind is DocumentKind.LATEX:
        return trimmed.startswith(_LATEX_COMMENT)
    return trimmed.startswith(_MARKDOWN_COMMENT_OPEN) and trimmed.endswith(
        _MARKDOWN_COMMENT_CLOSE
    )


def _run_end(line: str, i: int) -> int:
    """从 i 开始的连续定界字符结束位置"""
    n = len(line)
    while i < n and line[i] == MARKER_CHAR:
        i += 1
    return i


def scan(line: str, kind: DocumentKind) -> list[Marker]:
    """扫描一行，返回按出现顺序排列的标记列表"""
    if is_comment_line(line, kind):
        return []

    markers: list[Marker] = []
    n = len(line)
    i = 0

    while i < n:
        if line[i] != MARKER_CHAR:
            i += 1
            continue

        opener_end = _run_end(line, i)
        count = opener_end - i
        category = RUN_LENGTH_CATEGORIES.get(count)
        if category is None:
            # 1 个或 >= 5 个分号：不是起始符
            i = opener_end
            continue

        # 向后寻找等长的结束符
        k = opener_end
        closed = False
        while k < n:
            if line[k] != MARKER_CHAR:
                k += 1
                continue
            closer_end = _run_end(line, k)
            if closer_end - k == count:
                markers.append(
                    Marker(
                        category=category,
                        payload=line[opener_end:k],
                        start=i,
                        end=closer_end,
                    )
                )
                i = closer_end
                closed = True
                break
            k = closer_end

        if not closed:
            i = opener_end

    return markers
