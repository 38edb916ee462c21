"""行处理流程与手动选区入口"""

from lazy_latex.engine.line_processor import LineProcessor

__all__ = ["LineProcessor"]
