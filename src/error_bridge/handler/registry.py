"""
进程级处理器注册。

安装拦截器会替换 ``warnings.showwarning``、把警告过滤器设为 ``always``，
并可选地替换 ``sys.excepthook``。每次 ``install()`` 都把之前的状态压栈，
``restore()`` 按后进先出的顺序恢复。
"""

from __future__ import annotations

import logging
import sys
import warnings
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from types import TracebackType
from typing import TYPE_CHECKING

from error_bridge.errors import HandlerRegistrationError

if TYPE_CHECKING:
    from error_bridge.handler.interceptor import ErrorInterceptor

logger = logging.getLogger(__name__)

ExceptHook = Callable[[type[BaseException], BaseException, TracebackType | None], object]


@dataclass
class _Installation:
    interceptor: ErrorInterceptor
    warnings_scope: warnings.catch_warnings
    previous_excepthook: ExceptHook


class HandlerRegistry:
    """
    拦截器的安装与恢复。

    Examples:
        >>> registry = HandlerRegistry()
        >>> with registry.installed(interceptor):
        ...     run_request()
        >>> registry.depth
        0
    """

    def __init__(self) -> None:
        self._stack: list[_Installation] = []

    def install(
        self,
        interceptor: ErrorInterceptor,
        excepthook: ExceptHook | None = None,
    ) -> None:
        """
        安装拦截器。

        参数:
            interceptor: 接管 ``warnings.showwarning`` 的拦截器
            excepthook: 同时替换的 ``sys.excepthook``；None 时保持不变
        """
        scope = warnings.catch_warnings()
        scope.__enter__()
        warnings.simplefilter("always")
        warnings.showwarning = interceptor.showwarning

        previous_excepthook = sys.excepthook
        if excepthook is not None:
            sys.excepthook = excepthook

        self._stack.append(_Installation(interceptor, scope, previous_excepthook))
        logger.debug("已安装 %r（栈深度 %d）", interceptor, len(self._stack))

    def restore(self) -> None:
        """
        恢复上一次 ``install()`` 之前的状态。

        异常:
            HandlerRegistrationError: 没有可恢复的安装记录
        """
        if not self._stack:
            raise HandlerRegistrationError(
                what="无法恢复上一个错误处理器。",
                why="处理器栈为空，restore() 的调用次数多于 install()。",
                how="确保每次 install() 都对应一次 restore()，或使用 installed() 上下文管理器。",
            )

        installation = self._stack.pop()
        sys.excepthook = installation.previous_excepthook
        installation.warnings_scope.__exit__(None, None, None)
        logger.debug("已恢复 %r 之前的处理器（栈深度 %d）", installation.interceptor, len(self._stack))

    def restore_all(self) -> None:
        """恢复全部安装记录。"""
        while self._stack:
            self.restore()

    @contextmanager
    def installed(
        self,
        interceptor: ErrorInterceptor,
        excepthook: ExceptHook | None = None,
    ) -> Iterator[ErrorInterceptor]:
        """在 with 块内安装拦截器，退出时恢复。"""
        self.install(interceptor, excepthook)
        try:
            yield interceptor
        finally:
            self.restore()

    @property
    def active(self) -> ErrorInterceptor | None:
        """当前生效的拦截器。"""
        return self._stack[-1].interceptor if self._stack else None

    @property
    def depth(self) -> int:
        """当前安装栈深度。"""
        return len(self._stack)


default_registry = HandlerRegistry()
