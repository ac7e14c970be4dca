"""
Error Bridge 配置模块。

提供 YAML 配置加载与 Pydantic Schema。
"""

from error_bridge.config.loader import find_config_file, load_config, validate_config_file
from error_bridge.config.schema import (
    ErrorBridgeConfig,
    HandlerConfig,
    PresenterConfig,
    TraceConfig,
)

__all__ = [
    "ErrorBridgeConfig",
    "HandlerConfig",
    "PresenterConfig",
    "TraceConfig",
    "find_config_file",
    "load_config",
    "validate_config_file",
]
