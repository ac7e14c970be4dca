"""
调用栈帧记录与采集。

``StackFrame`` 是采集时刻的不可变快照；``SimplifiedStackFrame`` 是把参数列表
压缩成一行摘要后的展示形式。两者的帧序列均为最内层在前。
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import FrameType, TracebackType
from typing import Any

from error_bridge.trace.simplify import simplify_arguments

ArgumentKey = str | int


@dataclass(frozen=True)
class SimplifiedStackFrame:
    """简化后的栈帧，args 为预渲染的参数摘要。"""

    function: str
    filename: str | None = None
    lineno: int | None = None
    args: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """转换为 JSON 友好的字典，缺失字段不输出。"""
        result: dict[str, Any] = {"function": self.function}
        if self.filename is not None:
            result["file"] = self.filename
        if self.lineno is not None:
            result["line"] = self.lineno
        if self.args is not None:
            result["args"] = self.args
        return result


@dataclass(frozen=True)
class StackFrame:
    """
    采集到的调用栈帧。

    Attributes:
        function: 函数名
        filename: 源文件路径
        lineno: 当前执行行号
        args: 调用参数的 (键, 值) 序列；位置参数以整数下标为键，
            仅限关键字参数与 ``**kwargs`` 以参数名为键。None 表示未采集参数。
    """

    function: str
    filename: str | None = None
    lineno: int | None = None
    args: tuple[tuple[ArgumentKey, Any], ...] | None = None

    @classmethod
    def from_frame(cls, frame: FrameType, lineno: int | None = None) -> StackFrame:
        """从解释器帧对象创建快照。"""
        code = frame.f_code
        return cls(
            function=code.co_name,
            filename=code.co_filename,
            lineno=frame.f_lineno if lineno is None else lineno,
            args=frame_arguments(frame),
        )

    def simplify(self) -> SimplifiedStackFrame:
        """返回参数被替换为摘要文本的简化帧。"""
        return SimplifiedStackFrame(
            function=self.function,
            filename=self.filename,
            lineno=self.lineno,
            args=None if self.args is None else simplify_arguments(dict(self.args)),
        )


def frame_arguments(frame: FrameType) -> tuple[tuple[ArgumentKey, Any], ...]:
    """
    读取帧的调用参数。

    位置参数（含 ``*args`` 展开部分）按出现顺序编号 0..n-1，
    仅限关键字参数与 ``**kwargs`` 按名称登记。已被 ``del`` 的参数跳过。
    """
    code = frame.f_code
    f_locals = frame.f_locals
    positional = code.co_argcount
    keyword_only = code.co_kwonlyargcount
    names = code.co_varnames

    values: list[Any] = []
    named: list[tuple[ArgumentKey, Any]] = []

    for name in names[:positional]:
        if name in f_locals:
            values.append(f_locals[name])
    for name in names[positional:positional + keyword_only]:
        if name in f_locals:
            named.append((name, f_locals[name]))

    index = positional + keyword_only
    if code.co_flags & inspect.CO_VARARGS:
        extra = f_locals.get(names[index])
        if isinstance(extra, tuple):
            values.extend(extra)
        index += 1
    if code.co_flags & inspect.CO_VARKEYWORDS:
        extra = f_locals.get(names[index])
        if isinstance(extra, dict):
            named.extend(extra.items())

    return tuple(enumerate(values)) + tuple(named)


def capture_stack(frame: FrameType | None) -> tuple[StackFrame, ...]:
    """从给定帧开始向外采集调用栈，最内层在前。"""
    stack: list[StackFrame] = []
    while frame is not None:
        stack.append(StackFrame.from_frame(frame))
        frame = frame.f_back
    return tuple(stack)


def frames_from_traceback(tb: TracebackType | None) -> tuple[StackFrame, ...]:
    """把 traceback 链转换为栈帧序列，最内层在前。"""
    stack: list[StackFrame] = []
    while tb is not None:
        stack.append(StackFrame.from_frame(tb.tb_frame, lineno=tb.tb_lineno))
        tb = tb.tb_next
    stack.reverse()
    return tuple(stack)
