"""
Error Bridge 结构化异常体系。

库自身的错误遵循"三段式"规范：What / Why / How to fix。
运行时信号转换得到的 ErrorException 保持原始消息不变。
"""

from error_bridge.errors.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    ErrorBridgeError,
    ErrorException,
    HandlerRegistrationError,
)

__all__ = [
    "ConfigLoadError",
    "ConfigValidationError",
    "ErrorBridgeError",
    "ErrorException",
    "HandlerRegistrationError",
]
