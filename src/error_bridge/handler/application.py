"""
应用级错误处理器协议与默认实现。

拦截器只依赖两个入口：

- ``handle_error()``：转换功能关闭时接收原始信号
- ``handle_exception()``：字符串转换上下文中无法抛出时直接接收结构化错误
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from error_bridge.severity import severity_name

logger = logging.getLogger(__name__)


@runtime_checkable
class ApplicationHandler(Protocol):
    """应用级错误处理器协议。"""

    def handle_error(self, severity: int, message: str, filename: str, lineno: int) -> None:
        """处理未转换的运行时错误信号。"""
        ...

    def handle_exception(self, exc: BaseException) -> None:
        """处理已成形的异常。"""
        ...


class LoggingApplicationHandler:
    """
    默认的应用级处理器：把信号和异常写入日志。

    Examples:
        >>> handler = LoggingApplicationHandler()
        >>> handler.handle_error(Severity.USER_WARNING, "磁盘将满", "app.py", 12)
    """

    def __init__(self, logger_: logging.Logger | None = None) -> None:
        self._logger = logger_ or logger

    def handle_error(self, severity: int, message: str, filename: str, lineno: int) -> None:
        self._logger.warning(
            "%s: %s (%s:%d)", severity_name(severity), message, filename, lineno
        )

    def handle_exception(self, exc: BaseException) -> None:
        self._logger.error(
            "未捕获的异常 %s: %s",
            type(exc).__name__,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )

