"""
上文窗口：取当前行之前最多 N 行，按原顺序用换行拼接

N <= 0 时关闭（返回空串）；N 大于已有行数时返回全部上文。
"""

from collections.abc import Sequence


def context_before_line(lines: Sequence[str], line_number: int, max_lines: int) -> str:
    """返回 line_number（0 起）之前最多 max_lines 行的拼接文本"""
    if not max_lines or max_lines <= 0:
        return ""

    end = min(line_number, len(lines))
    start = max(0, end - max_lines)
    if end <= start:
        return ""

    return "\n".join(lines[start:end])
