"""
标记识别数据结构

Marker 在每次"行完成"时由扫描器新建，只读，经过一次替换后即丢弃。
"""

from dataclasses import dataclass
from enum import Enum


class DocumentKind(str, Enum):
    """文档类型：决定注释约定和输出定界符"""

    LATEX = "latex"  # 结构化文档：% 单行注释
    MARKDOWN = "markdown"  # 自由文档：<!-- ... --> 包裹注释

    @classmethod
    def from_language_id(cls, language_id: str | None) -> "DocumentKind | None":
        """编辑器 languageId → DocumentKind，不支持的语言返回 None"""
        if not language_id:
            return None
        try:
            return cls(language_id.lower())
        except ValueError:
            return None


class MarkerCategory(str, Enum):
    """标记类别，由定界符连续长度唯一决定"""

    INLINE = "inline"  # ;;...;;     行内公式
    DISPLAY = "display"  # ;;;...;;;   独立公式块
    ANYTHING = "anything"  # ;;;;...;;;; 任意内容插入

    @property
    def is_math(self) -> bool:
        return self is not MarkerCategory.ANYTHING


# 协议常量：定界字符 + 连续长度 → 类别（不可配置）
MARKER_CHAR = ";"
RUN_LENGTH_CATEGORIES: dict[int, MarkerCategory] = {
    2: MarkerCategory.INLINE,
    3: MarkerCategory.DISPLAY,
    4: MarkerCategory.ANYTHING,
}


@dataclass(frozen=True)
class Marker:
    """一行中识别到的一个标记"""

    category: MarkerCategory
    payload: str  # 起止定界符之间的原始文本，不做任何处理
    start: int  # 起始定界符第一个字符的下标
    end: int  # 结束定界符之后的下标（半开区间）

    @property
    def span(self) -> tuple[int, int]:
        return self.start, self.end
