"""
Error Bridge：把运行时警告信号转换为结构化异常，并输出有界的调用栈摘要。

快速上手::

    from error_bridge import ErrorException, ErrorHandler, Severity, trigger_error

    handler = ErrorHandler()
    with handler.installed():
        try:
            trigger_error("配额即将耗尽", Severity.USER_WARNING)
        except ErrorException as exc:
            frames = handler.trace_filter.filter_exception(exc)

FastAPI 集成::

    from fastapi import FastAPI
    from error_bridge.web import error_bridge_lifespan, register_error_handlers

    app = FastAPI(lifespan=error_bridge_lifespan(handler))
    register_error_handlers(app, handler.presenter)
"""

from error_bridge.config import ErrorBridgeConfig, load_config
from error_bridge.errors import (
    ConfigLoadError,
    ConfigValidationError,
    ErrorBridgeError,
    ErrorException,
    HandlerRegistrationError,
)
from error_bridge.facade import ErrorHandler
from error_bridge.handler import (
    ApplicationHandler,
    ErrorInterceptor,
    HandlerRegistry,
    LoggingApplicationHandler,
    RuntimeErrorSignal,
)
from error_bridge.severity import Severity, error_reporting, trigger_error
from error_bridge.trace import (
    ErrorTraceFilter,
    SimplifiedStackFrame,
    StackFrame,
    simplify_argument,
    simplify_arguments,
)
from error_bridge.web import ErrorPresenter

__version__ = "0.1.0"

__all__ = [
    # 顶层入口
    "ErrorHandler",
    # 配置
    "ErrorBridgeConfig",
    "load_config",
    # 异常
    "ConfigLoadError",
    "ConfigValidationError",
    "ErrorBridgeError",
    "ErrorException",
    "HandlerRegistrationError",
    # 拦截
    "ApplicationHandler",
    "ErrorInterceptor",
    "HandlerRegistry",
    "LoggingApplicationHandler",
    "RuntimeErrorSignal",
    "Severity",
    "error_reporting",
    "trigger_error",
    # 调用栈
    "ErrorTraceFilter",
    "SimplifiedStackFrame",
    "StackFrame",
    "simplify_argument",
    "simplify_arguments",
    # 展示
    "ErrorPresenter",
    # 版本
    "__version__",
]
