"""
结构化异常体系。

包含两类异常：

1. ``ErrorBridgeError`` 及其子类：加载配置、安装处理器时的使用错误。
   消息分三段：发生了什么、原因、修复建议。
2. ``ErrorException``：由运行时警告信号转换而来的结构化错误。
   它的字符串形式必须与原始消息完全一致，因此不继承三段式基类。

示例::

    raise HandlerRegistrationError(
        what="无法恢复上一个错误处理器。",
        why="处理器栈为空，restore() 调用次数多于 install()。",
        how="确保每次 install() 都对应一次 restore()，或使用 installed() 上下文管理器。",
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from error_bridge.trace.frames import StackFrame


class ErrorBridgeError(Exception):
    """
    Error Bridge 使用错误的基类。

    属性:
        what: 发生了什么
        why: 为什么发生（可为空）
        how: 怎么修复（可为空）
    """

    def __init__(self, what: str, why: str = "", how: str = "") -> None:
        super().__init__(what)
        self.what = what
        self.why = why
        self.how = how

    def __str__(self) -> str:
        lines = [self.what]
        if self.why:
            lines.append(f"  原因：{self.why}")
        if self.how:
            lines.append(f"  修复：{self.how}")
        return "\n".join(lines)


# === 配置相关异常 ===


class ConfigLoadError(ErrorBridgeError):
    """
    配置文件无法读取：文件不存在、编码错误、YAML 语法错误或根元素不是映射。

    属性:
        source: 配置文件路径
        line: YAML 语法错误所在行（从 1 开始），其他情况为 None
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        *,
        source: str = "",
        line: int | None = None,
    ) -> None:
        super().__init__(what, why, how)
        self.source = source
        self.line = line


class ConfigValidationError(ErrorBridgeError):
    """
    配置内容不合法：未知的段，或字段取值不满足 Schema。

    属性:
        source: 配置来源（文件路径或 ``<default>``）
        field_path: 第一个出错字段的点分路径，例如 ``trace.max_trace_size``
    """

    def __init__(
        self,
        what: str,
        why: str = "",
        how: str = "",
        *,
        source: str = "",
        field_path: str = "",
    ) -> None:
        super().__init__(what, why, how)
        self.source = source
        self.field_path = field_path


# === 注册相关异常 ===


class HandlerRegistrationError(ErrorBridgeError):
    """install() / restore() 调用不成对。"""


# === 运行时信号转换得到的结构化错误 ===


class ErrorException(Exception):
    """
    由运行时警告信号转换而来的结构化错误。

    调用栈在构造时作为参数传入，构造后不可修改。

    属性:
        message: 原始警告消息
        severity: 严重级别（``Severity`` 位值）
        filename: 发出警告的源文件
        lineno: 发出警告的行号
        trace: 信号发出时的调用栈（最内层在前）
        category: 原始警告类别（直接调用 ``handle()`` 时可能为 None）
    """

    def __init__(
        self,
        message: str,
        severity: int,
        filename: str = "",
        lineno: int = 0,
        trace: tuple[StackFrame, ...] = (),
        category: type[Warning] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.filename = filename
        self.lineno = lineno
        self.trace = tuple(trace)
        self.category = category

    @property
    def code(self) -> int:
        """错误码，与 severity 相同。"""
        return self.severity

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"ErrorException(message={self.message!r}, severity={self.severity}, "
            f"filename={self.filename!r}, lineno={self.lineno})"
        )
