"""
重入保护：自身提交的编辑不能再触发标记扫描

由行处理器持有（而不是模块全局变量），在提交原子编辑前置位，
编辑结束后无论成败都清除，避免异常后永久停止处理。
"""

from collections.abc import Iterator
from contextlib import contextmanager


class EditGuard:
    """原子编辑期间的重入标志"""

    def __init__(self):
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    @contextmanager
    def hold(self) -> Iterator[None]:
        self._active = True
        try:
            yield
        finally:
            self._active = False
