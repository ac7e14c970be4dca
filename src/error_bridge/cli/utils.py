"""
CLI 工具函数：Rich 输出与调用栈表格。
"""

from __future__ import annotations

import sys
from typing import NoReturn

from rich.console import Console
from rich.table import Table

from error_bridge.trace.frames import SimplifiedStackFrame

_console: Console | None = None


def create_console() -> Console:
    """创建或获取全局 Rich Console 实例。"""
    global _console
    if _console is None:
        _console = Console()
    return _console


def print_error(message: str, exit_code: int = 1) -> NoReturn:
    """
    打印错误信息并退出程序。

    参数:
        message: 错误信息
        exit_code: 退出码（默认 1）
    """
    console = create_console()
    # 使用 X 而非 ✗，避免 Windows 终端编码问题
    console.print(f"[bold red]X 错误：[/bold red]{message}")
    sys.exit(exit_code)


def print_success(message: str) -> None:
    """打印成功信息。"""
    create_console().print(f"[bold green]OK[/bold green] {message}")


def build_trace_table(frames: list[SimplifiedStackFrame], title: str = "调用栈") -> Table:
    """
    把简化后的调用栈渲染为 Rich 表格。

    参数:
        frames: 简化栈帧，最内层在前
        title: 表格标题

    返回:
        Rich Table 实例
    """
    table = Table(title=title, show_lines=False)
    table.add_column("#", justify="right", style="dim")
    table.add_column("函数", style="cyan")
    table.add_column("位置")
    table.add_column("参数", overflow="fold")

    for index, frame in enumerate(frames):
        location = ""
        if frame.filename is not None:
            location = f"{frame.filename}:{frame.lineno}"
        table.add_row(str(index), frame.function, location, frame.args or "")

    return table
