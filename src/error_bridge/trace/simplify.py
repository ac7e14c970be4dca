"""
调用参数的简化表示。

把任意类型的调用参数转换为简短、有损的文本标记，用于在错误响应和日志中
展示调用栈，而不泄露对象内部状态，也不产生无界输出。

规则一览：

======================  ==============================================
参数类型                 输出
======================  ==============================================
对象实例                 类型名（不展开字段）
bool                    ``true`` / ``false``
str                     单引号包裹，超过 64 个字符截断并追加 ``...``
bytes                   ``b'...'`` 形式，超过 64 字节截断
list / tuple / set      递归简化，``[`` ``]`` 包裹
dict                    递归简化，``[`` ``]`` 包裹
None                    ``null``
文件、socket、mmap、selector  ``resource``
数字                     原样文本
======================  ==============================================

集合最多展示 4 个元素，第 5 个元素替换为 ``...``，其后的元素直接丢弃。
"""

from __future__ import annotations

import functools
import io
import logging
import mmap
import numbers
import selectors
import socket
from collections.abc import Iterable, Mapping, Set
from collections.abc import Sequence as _Sequence
from typing import Any

logger = logging.getLogger(__name__)

MAX_STRING_LENGTH = 64
MAX_ARGUMENTS = 5
ELLIPSIS = "..."
RECURSION_MARKER = "[...]"


def simplify_argument(value: Any) -> str:
    """
    返回单个参数值的简化文本。

    本函数不会抛出异常：无法处理的值降级为其类型名。
    """
    return _simplify_safely(value, frozenset())


def simplify_arguments(args: Mapping[Any, Any] | Iterable[Any]) -> str:
    """
    返回参数集合的简化文本。

    参数:
        args: 映射（按键展示）或可迭代对象（按位置展示）

    返回:
        以 ", " 连接的参数文本；空集合返回空字符串
    """
    try:
        return _render_collection(args, frozenset())
    except Exception:
        logger.debug("参数集合简化失败，降级为类型名。", exc_info=True)
        return type(args).__qualname__


def is_sequential(keys: Iterable[Any]) -> bool:
    """键是否恰好为 0..n-1 的顺序整数。"""
    return all(type(key) is int and key == index for index, key in enumerate(keys))


def _simplify_safely(value: Any, seen: frozenset[int]) -> str:
    try:
        return _simplify(value, seen)
    except Exception:
        logger.debug("参数简化失败，降级为类型名。", exc_info=True)
        return type(value).__qualname__


def _render_collection(collection: Any, seen: frozenset[int]) -> str:
    if isinstance(collection, Mapping):
        entries: Iterable[tuple[Any, Any]] = collection.items()
        associative = not is_sequential(collection.keys())
    else:
        entries = enumerate(collection)
        associative = False

    seen = seen | {id(collection)}
    parts: list[str] = []
    for count, (key, value) in enumerate(entries, start=1):
        if count >= MAX_ARGUMENTS:
            parts.append(ELLIPSIS)
            break

        text = _simplify_safely(value, seen)
        if isinstance(key, str):
            text = f"'{key}' => {text}"
        elif associative:
            text = f"{_simplify_safely(key, seen)} => {text}"
        parts.append(text)

    return ", ".join(parts)


@functools.singledispatch
def _simplify(value: Any, seen: frozenset[int]) -> str:
    return type(value).__qualname__


@_simplify.register
def _(value: bool, seen: frozenset[int]) -> str:
    return "true" if value else "false"


@_simplify.register
def _(value: str, seen: frozenset[int]) -> str:
    if len(value) > MAX_STRING_LENGTH:
        return f"'{value[:MAX_STRING_LENGTH]}{ELLIPSIS}'"
    return f"'{value}'"


@_simplify.register(bytes)
@_simplify.register(bytearray)
@_simplify.register(memoryview)
def _(value: Any, seen: frozenset[int]) -> str:
    data = bytes(value[: MAX_STRING_LENGTH + 1])
    if len(data) > MAX_STRING_LENGTH:
        return repr(data[:MAX_STRING_LENGTH])[:-1] + ELLIPSIS + "'"
    return repr(data)


@_simplify.register(type(None))
def _(value: None, seen: frozenset[int]) -> str:
    return "null"


@_simplify.register(io.IOBase)
@_simplify.register(socket.socket)
@_simplify.register(mmap.mmap)
@_simplify.register(selectors.BaseSelector)
def _(value: Any, seen: frozenset[int]) -> str:
    return "resource"


@_simplify.register(numbers.Number)
def _(value: Any, seen: frozenset[int]) -> str:
    return str(value)


@_simplify.register(Mapping)
@_simplify.register(_Sequence)
@_simplify.register(Set)
def _(value: Any, seen: frozenset[int]) -> str:
    if id(value) in seen:
        return RECURSION_MARKER
    return "[" + _render_collection(value, seen) + "]"
