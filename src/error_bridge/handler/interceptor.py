"""
运行时错误信号拦截器。

把 ``warnings`` 发出的警告、提示、弃用信号转换为可捕获的 ``ErrorException``，
沿正常异常路径抛出。四种结局：

1. 转换关闭：交给应用级处理器的 ``handle_error()``，不检查掩码
2. 严重级别被进程级错误报告掩码屏蔽：静默忽略；
   未被屏蔽但不在本处理器接管的 ``levels`` 内：交给 ``handle_error()``
3. 常规情况：构造 ``ErrorException`` 并抛出
4. 运行环境不支持在字符串转换方法中抛出异常，且信号来自此类方法：
   直接交给应用级处理器的 ``handle_exception()``，不抛出
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, TextIO

from error_bridge.errors import ErrorException
from error_bridge.handler.application import ApplicationHandler, LoggingApplicationHandler
from error_bridge.severity import Severity, is_reported, severity_for_category, severity_name
from error_bridge.trace.frames import StackFrame, capture_stack

if TYPE_CHECKING:
    from error_bridge.config.schema import HandlerConfig

logger = logging.getLogger(__name__)

STRING_CONVERSION_METHODS = frozenset({"__str__", "__repr__", "__format__"})

# 信号投递链路上的模块，采集调用栈时跳过
_DELIVERY_MODULES = frozenset({__name__, "warnings", "_py_warnings"})


@dataclass(frozen=True)
class RuntimeErrorSignal:
    """一次运行时错误信号。"""

    severity: int
    message: str
    filename: str
    lineno: int
    category: type[Warning] | None = None

    @classmethod
    def from_warning(
        cls,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
    ) -> RuntimeErrorSignal:
        """从 ``warnings.showwarning`` 的参数构造信号。"""
        return cls(
            severity=severity_for_category(category),
            message=str(message),
            filename=filename,
            lineno=lineno,
            category=category,
        )


class ErrorInterceptor:
    """
    运行时错误信号处理器。

    通过 ``HandlerRegistry`` 安装为 ``warnings.showwarning`` 后，
    每个警告都会经过 ``handle()``。

    Examples:
        >>> interceptor = ErrorInterceptor(LoggingApplicationHandler())
        >>> with HandlerRegistry().installed(interceptor):
        ...     try:
        ...         trigger_error("磁盘将满", Severity.USER_WARNING)
        ...     except ErrorException as exc:
        ...         assert exc.code == Severity.USER_WARNING
    """

    def __init__(
        self,
        application: ApplicationHandler | None = None,
        *,
        convert_error_to_exception: bool = True,
        raise_in_string_conversion: bool = True,
        levels: int = Severity.ALL,
        reporting: Callable[[int], bool] = is_reported,
    ) -> None:
        """
        Args:
            application: 应用级处理器，默认写日志
            convert_error_to_exception: 是否把信号转换为异常
            raise_in_string_conversion: 运行环境是否支持在 ``__str__`` 等方法中抛出异常
            levels: 本处理器转换的严重级别，其余未被掩码屏蔽的级别交给 ``handle_error()``
            reporting: 进程级错误报告掩码查询
        """
        self.application = application or LoggingApplicationHandler()
        self.convert_error_to_exception = convert_error_to_exception
        self.raise_in_string_conversion = raise_in_string_conversion
        self.levels = levels
        self._reporting = reporting

    @classmethod
    def from_config(
        cls,
        config: HandlerConfig,
        application: ApplicationHandler | None = None,
    ) -> ErrorInterceptor:
        """根据配置创建拦截器。"""
        return cls(
            application,
            convert_error_to_exception=config.convert_error_to_exception,
            raise_in_string_conversion=config.raise_in_string_conversion,
            levels=config.error_reporting,
        )

    def handle(self, signal: RuntimeErrorSignal) -> bool:
        """
        处理一个运行时错误信号。

        返回:
            是否继续执行默认处理，恒为 False

        异常:
            ErrorException: 信号被转换为结构化错误
        """
        if not self.convert_error_to_exception:
            return self._delegate(signal)

        if not self._reporting(signal.severity):
            return False

        if not (self.levels & signal.severity):
            return self._delegate(signal)

        exception = ErrorException(
            signal.message,
            signal.severity,
            filename=signal.filename,
            lineno=signal.lineno,
            trace=self._capture_trace(),
            category=signal.category,
        )

        if not self.raise_in_string_conversion and _in_string_conversion(exception.trace):
            logger.warning(
                "在字符串转换方法中收到 %s，交给应用级处理器：%s",
                severity_name(signal.severity),
                signal.message,
            )
            self.application.handle_exception(exception)
            return False

        logger.debug(
            "%s 已转换为 ErrorException：%s (%s:%d)",
            severity_name(signal.severity),
            signal.message,
            signal.filename,
            signal.lineno,
        )
        raise exception

    def showwarning(
        self,
        message: Warning | str,
        category: type[Warning],
        filename: str,
        lineno: int,
        file: TextIO | None = None,
        line: str | None = None,
    ) -> None:
        """``warnings.showwarning`` 兼容入口。"""
        self.handle(RuntimeErrorSignal.from_warning(message, category, filename, lineno))

    def _delegate(self, signal: RuntimeErrorSignal) -> bool:
        self.application.handle_error(
            signal.severity, signal.message, signal.filename, signal.lineno
        )
        return False

    def _capture_trace(self) -> tuple[StackFrame, ...]:
        frame = inspect.currentframe()
        try:
            while frame is not None and frame.f_globals.get("__name__") in _DELIVERY_MODULES:
                frame = frame.f_back
            return capture_stack(frame)
        finally:
            del frame

    def __repr__(self) -> str:
        return (
            f"ErrorInterceptor(convert_error_to_exception={self.convert_error_to_exception}, "
            f"raise_in_string_conversion={self.raise_in_string_conversion})"
        )


def _in_string_conversion(trace: tuple[StackFrame, ...]) -> bool:
    return any(frame.function in STRING_CONVERSION_METHODS for frame in trace)
