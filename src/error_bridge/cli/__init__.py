"""
Error Bridge CLI。

- validate: 校验 YAML 配置文件
- run: 在拦截器生效的环境中执行脚本
"""

from error_bridge.cli.app import app, main

__all__ = ["app", "main"]
