"""
Error Bridge CLI 入口。

用法::

    error-bridge --help
    error-bridge validate error_bridge.yaml
    error-bridge run script.py -- --script-arg
"""

from __future__ import annotations

import typer

app = typer.Typer(
    name="error-bridge",
    help="Error Bridge：运行时警告转异常与调用栈摘要工具",
    add_completion=False,
    no_args_is_help=True,
)


@app.command(name="validate")
def validate(
    path: str = typer.Argument(
        "error_bridge.yaml",
        help="YAML 配置文件路径",
    ),
) -> None:
    """校验 YAML 配置文件。"""
    from error_bridge.cli.cmd_validate import validate_command
    validate_command(path=path)


@app.command(name="run")
def run(
    script: str = typer.Argument(..., help="要执行的 Python 脚本"),
    args: list[str] | None = typer.Argument(None, help="传给脚本的参数"),
    config: str | None = typer.Option(
        None,
        "--config",
        "-c",
        help="配置文件路径（默认自动搜索）",
    ),
    max_trace_size: int | None = typer.Option(
        None,
        "--max-trace-size",
        "-n",
        min=1,
        help="覆盖配置中的最大调用栈帧数",
    ),
) -> None:
    """在拦截器生效的环境中执行脚本，打印转换得到的错误与简化调用栈。"""
    from error_bridge.cli.cmd_run import run_command
    run_command(script=script, args=args, config_path=config, max_trace_size=max_trace_size)


def main() -> None:
    """CLI 主入口。"""
    app()


if __name__ == "__main__":
    main()
