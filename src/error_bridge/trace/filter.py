"""
调用栈过滤器：把无界的调用栈压缩为有界、可安全序列化的摘要。
"""

from __future__ import annotations

from collections.abc import Iterable
from itertools import islice

from error_bridge.errors import ErrorException
from error_bridge.trace.frames import SimplifiedStackFrame, StackFrame, frames_from_traceback

DEFAULT_MAX_TRACE_SIZE = 10


class ErrorTraceFilter:
    """
    生成调用栈的简化表示。

    只保留最内层的 ``max_trace_size`` 帧，多余的帧直接丢弃；
    每帧的参数列表替换为一行摘要文本。

    Examples:
        >>> trace_filter = ErrorTraceFilter(max_trace_size=3)
        >>> frames = trace_filter.filter_exception(exc)
        >>> [frame.to_dict() for frame in frames]
    """

    def __init__(self, max_trace_size: int = DEFAULT_MAX_TRACE_SIZE) -> None:
        if max_trace_size < 0:
            raise ValueError("max_trace_size 不能为负数")
        self.max_trace_size = max_trace_size

    def filter(self, trace: Iterable[StackFrame]) -> list[SimplifiedStackFrame]:
        """
        简化调用栈。

        参数:
            trace: 原始调用栈，最内层在前

        返回:
            长度不超过 max_trace_size 的简化栈
        """
        return [frame.simplify() for frame in islice(trace, self.max_trace_size)]

    def filter_exception(self, exc: BaseException) -> list[SimplifiedStackFrame]:
        """
        简化异常携带的调用栈。

        ``ErrorException`` 使用构造时采集的调用栈，
        其他异常使用 ``__traceback__``。
        """
        if isinstance(exc, ErrorException):
            return self.filter(exc.trace)
        return self.filter(frames_from_traceback(exc.__traceback__))

    def __repr__(self) -> str:
        return f"ErrorTraceFilter(max_trace_size={self.max_trace_size})"
