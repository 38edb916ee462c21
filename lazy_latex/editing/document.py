"""
内存文本缓冲区：宿主编辑器文档的最小实现

- 按行存储，位置用 (line, character) 表示
- 每次修改同步通知观察者：(document, 起始行号, 插入的文本)
- apply_edit 针对某一行的"当前"内容按区间应用，迟到的生成结果也照此写入
"""

from collections.abc import Callable
from typing import NamedTuple

from lazy_latex.editing.replacement import LineEdit, render_line

ChangeListener = Callable[["Document", int, str], None]


class Position(NamedTuple):
    line: int
    character: int


class Document:
    """带变更通知的行缓冲区"""

    def __init__(
        self,
        text: str = "",
        language_id: str = "latex",
        project_root: str | None = None,
    ):
        self._lines: list[str] = text.split("\n")
        self.language_id = language_id
        self.project_root = project_root
        self._listeners: list[ChangeListener] = []

    # ── 读取 ──

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return "\n".join(self._lines)

    @property
    def line_count(self) -> int:
        return len(self._lines)

    def line_at(self, line_number: int) -> str:
        if not 0 <= line_number < len(self._lines):
            raise IndexError(f"line {line_number} out of range (0..{len(self._lines) - 1})")
        return self._lines[line_number]

    def get_text(self, start: Position, end: Position) -> str:
        return self.text[self._offset(start) : self._offset(end)]

    # ── 订阅 ──

    def subscribe(self, listener: ChangeListener) -> Callable[[], None]:
        """注册变更观察者，返回取消订阅函数"""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    # ── 修改 ──

    def replace_range(self, start: Position, end: Position, new_text: str) -> None:
        """替换 [start, end) 区间的文本并通知观察者"""
        a, b = self._offset(start), self._offset(end)
        if a > b:
            raise ValueError("range start is after range end")
        text = self.text
        self._lines = (text[:a] + new_text + text[b:]).split("\n")
        self._notify(start.line, new_text)

    def insert_text(self, position: Position, new_text: str) -> None:
        self.replace_range(position, position, new_text)

    def type_line(self, text: str) -> None:
        """模拟在文档末尾输入一行并回车"""
        last = len(self._lines) - 1
        self.insert_text(Position(last, len(self._lines[last])), text + "\n")

    def apply_edit(self, line_number: int, edit: LineEdit) -> None:
        """把单行原子编辑应用到该行当前内容上（一次修改、一次通知）"""
        current = self.line_at(line_number)
        if edit.is_empty:
            return
        self.replace_range(
            Position(line_number, 0),
            Position(line_number, len(current)),
            render_line(current, edit),
        )

    # ── 内部 ──

    def _offset(self, position: Position) -> int:
        line = self.line_at(position.line)
        if not 0 <= position.character <= len(line):
            raise IndexError(f"character {position.character} out of range on line {position.line}")
        return sum(len(l) + 1 for l in self._lines[: position.line]) + position.character

    def _notify(self, line_number: int, inserted_text: str) -> None:
        for listener in list(self._listeners):
            listener(self, line_number, inserted_text)
