"""
编辑层：替换引擎、重入保护、内存文档
"""

from lazy_latex.editing.document import Document, Position
from lazy_latex.editing.guard import EditGuard
from lazy_latex.editing.replacement import (
    EditResult,
    LineEdit,
    PlanEntry,
    apply_replacements,
    output_delimiters,
    plan_entries,
)

__all__ = [
    "Document",
    "EditGuard",
    "EditResult",
    "LineEdit",
    "PlanEntry",
    "Position",
    "apply_replacements",
    "output_delimiters",
    "plan_entries",
]
