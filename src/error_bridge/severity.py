"""
严重级别、错误报告掩码与用户信号触发。

Python 的运行时错误信号就是 ``warnings.warn()``。本模块把警告类别
映射为 ``Severity`` 位值，维护进程级的错误报告掩码，并提供
``trigger_error()`` 作为手动发出信号的入口。

用法::

    from error_bridge.severity import Severity, error_reporting, trigger_error

    error_reporting(Severity.ALL & ~Severity.DEPRECATED)  # 屏蔽弃用提示
    trigger_error("配置项已过时", Severity.USER_DEPRECATED)
"""

from __future__ import annotations

import enum
import warnings


class Severity(enum.IntFlag):
    """运行时错误信号的严重级别位。"""

    WARNING = 2
    NOTICE = 8
    USER_WARNING = 512
    USER_NOTICE = 1024
    DEPRECATED = 8192
    USER_DEPRECATED = 16384

    ALL = WARNING | NOTICE | USER_WARNING | USER_NOTICE | DEPRECATED | USER_DEPRECATED


class UserNotice(UserWarning):
    """用户级提示，对应 ``Severity.USER_NOTICE``。"""


class UserDeprecationWarning(FutureWarning):
    """用户级弃用提示，对应 ``Severity.USER_DEPRECATED``。"""


# 按 MRO 查找，子类必须在父类之前命中
_CATEGORY_SEVERITY: dict[type[Warning], Severity] = {
    UserNotice: Severity.USER_NOTICE,
    UserDeprecationWarning: Severity.USER_DEPRECATED,
    UserWarning: Severity.USER_WARNING,
    FutureWarning: Severity.USER_DEPRECATED,
    DeprecationWarning: Severity.DEPRECATED,
    PendingDeprecationWarning: Severity.DEPRECATED,
    RuntimeWarning: Severity.WARNING,
    SyntaxWarning: Severity.WARNING,
    UnicodeWarning: Severity.WARNING,
    BytesWarning: Severity.WARNING,
    ResourceWarning: Severity.NOTICE,
    ImportWarning: Severity.NOTICE,
    EncodingWarning: Severity.NOTICE,
}

_USER_CATEGORIES: dict[Severity, type[Warning]] = {
    Severity.USER_WARNING: UserWarning,
    Severity.USER_NOTICE: UserNotice,
    Severity.USER_DEPRECATED: UserDeprecationWarning,
}

_reporting_level: int = Severity.ALL


def severity_for_category(category: type[Warning]) -> Severity:
    """
    返回警告类别对应的严重级别。

    沿 MRO 查找第一个已登记的类别；自定义的 ``Warning`` 子类
    若未继承任何已登记类别，按 ``Severity.WARNING`` 处理。
    """
    for klass in category.__mro__:
        severity = _CATEGORY_SEVERITY.get(klass)
        if severity is not None:
            return severity
    return Severity.WARNING


def severity_name(code: int) -> str:
    """返回严重级别的可读名称，例如 ``USER_WARNING``。"""
    name = Severity(code).name
    return name or f"UNKNOWN({code})"


def error_reporting(level: int | None = None) -> int:
    """
    读取或设置进程级错误报告掩码。

    参数:
        level: 新的掩码。None 时只读取。

    返回:
        调用前的掩码值
    """
    global _reporting_level
    previous = _reporting_level
    if level is not None:
        _reporting_level = int(level)
    return previous


def is_reported(severity: int) -> bool:
    """当前掩码是否启用了该严重级别。"""
    return bool(_reporting_level & severity)


def trigger_error(message: str, severity: int = Severity.USER_NOTICE) -> None:
    """
    发出一个用户级运行时错误信号。

    参数:
        message: 错误消息
        severity: USER_WARNING / USER_NOTICE / USER_DEPRECATED 之一

    异常:
        ValueError: severity 不是用户级别
    """
    category = _USER_CATEGORIES.get(severity)
    if category is None:
        raise ValueError(
            f"trigger_error() 只接受用户级别（USER_WARNING / USER_NOTICE / USER_DEPRECATED），"
            f"实际为 {severity_name(severity)}。"
        )
    warnings.warn(message, category, stacklevel=2)
