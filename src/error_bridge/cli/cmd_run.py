"""
run 命令：在拦截器生效的环境中执行 Python 脚本。

脚本中的任何警告都会被转换为 ErrorException；脚本以异常结束时，
打印错误信息与简化后的调用栈，并以退出码 1 结束。
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import Any

from rich.markup import escape
from rich.panel import Panel

from error_bridge.cli.utils import build_trace_table, create_console, print_error, print_success
from error_bridge.config.loader import load_config
from error_bridge.errors import ErrorBridgeError, ErrorException
from error_bridge.facade import ErrorHandler
from error_bridge.severity import severity_name
from error_bridge.web.presenter import error_location

console = create_console()


def run_command(
    script: str,
    args: list[str] | None = None,
    config_path: str | None = None,
    max_trace_size: int | None = None,
) -> None:
    """
    执行脚本并报告转换得到的错误。

    参数:
        script: 脚本路径
        args: 传给脚本的命令行参数
        config_path: 配置文件路径（默认自动搜索）
        max_trace_size: 覆盖配置中的最大调用栈帧数
    """
    if not Path(script).exists():
        print_error(f"脚本不存在：{script}")

    overrides: dict[str, Any] = {}
    if max_trace_size is not None:
        overrides["trace"] = {"max_trace_size": max_trace_size}

    try:
        config = load_config(config_path, overrides or None)
    except ErrorBridgeError as e:
        print_error(escape(str(e)))

    handler = ErrorHandler(config)
    saved_argv = sys.argv
    sys.argv = [script, *(args or [])]
    try:
        with handler.installed():
            runpy.run_path(script, run_name="__main__")
    except Exception as exc:
        _report(handler, exc)
        sys.exit(1)
    finally:
        sys.argv = saved_argv

    print_success(f"{script} 执行完毕")


def _report(handler: ErrorHandler, exc: Exception) -> None:
    filename, lineno = error_location(exc)
    if isinstance(exc, ErrorException):
        title = f"[bold red]{severity_name(exc.severity)}[/bold red]"
    else:
        title = f"[bold red]{type(exc).__qualname__}[/bold red]"

    body = escape(str(exc))
    if filename is not None:
        body += f"\n[dim]{escape(filename)}:{lineno}[/dim]"

    console.print(Panel(body, title=title, border_style="red"))
    console.print(build_trace_table(handler.trace_filter.filter_exception(exc)))
