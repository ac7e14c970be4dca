"""
运行时错误信号的拦截、转换与注册。
"""

from error_bridge.handler.application import ApplicationHandler, LoggingApplicationHandler
from error_bridge.handler.interceptor import (
    STRING_CONVERSION_METHODS,
    ErrorInterceptor,
    RuntimeErrorSignal,
)
from error_bridge.handler.registry import HandlerRegistry, default_registry

__all__ = [
    "STRING_CONVERSION_METHODS",
    "ApplicationHandler",
    "ErrorInterceptor",
    "HandlerRegistry",
    "LoggingApplicationHandler",
    "RuntimeErrorSignal",
    "default_registry",
]
