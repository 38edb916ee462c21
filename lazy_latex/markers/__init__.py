"""
标记识别：分号定界标记的类型定义与单行扫描器
"""

from lazy_latex.markers.scanner import is_comment_line, scan
from lazy_latex.markers.schemas import DocumentKind, Marker, MarkerCategory

__all__ = ["DocumentKind", "Marker", "MarkerCategory", "is_comment_line", "scan"]
