"""
validate 命令：校验 YAML 配置文件。
"""

from __future__ import annotations

import sys
from pathlib import Path

from rich.markup import escape
from rich.panel import Panel

from error_bridge.cli.utils import create_console, print_error, print_success
from error_bridge.config.loader import validate_config_file

console = create_console()


def validate_command(path: str) -> None:
    """校验配置文件，失败时以退出码 1 结束。"""
    if not Path(path).exists():
        print_error(f"文件不存在：{path}")

    console.print(f"[bold]校验配置文件：[/bold] {path}\n")

    errors = validate_config_file(path)
    if errors:
        console.print(Panel(
            "\n".join(f"[red]X[/red] {escape(err)}" for err in errors),
            title=f"[bold red]校验失败（{len(errors)} 个错误）[/bold red]",
            border_style="red",
        ))
        sys.exit(1)

    print_success(f"{path} 校验通过")
