"""
ErrorHandler：组装拦截器、调用栈简化器与错误展示的统一入口。

快速上手::

    from error_bridge import ErrorHandler

    handler = ErrorHandler.from_file("error_bridge.yaml")
    with handler.installed():
        run_application()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any

from fastapi import Request
from fastapi.responses import Response

from error_bridge.config.loader import load_config
from error_bridge.config.schema import ErrorBridgeConfig
from error_bridge.handler.application import ApplicationHandler, LoggingApplicationHandler
from error_bridge.handler.interceptor import ErrorInterceptor
from error_bridge.handler.registry import HandlerRegistry, default_registry
from error_bridge.trace.filter import ErrorTraceFilter
from error_bridge.web.presenter import ErrorPresenter

logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Error Bridge 主入口。

    配置在构造时一次性解析，之后只读；``install()`` / ``restore()``
    通过 ``HandlerRegistry`` 管理进程级的安装状态。

    Attributes:
        config: 生效的配置
        application: 应用级处理器
        interceptor: 运行时错误信号拦截器
        trace_filter: 调用栈简化器
        presenter: 错误响应渲染器
    """

    def __init__(
        self,
        config: ErrorBridgeConfig | None = None,
        *,
        application: ApplicationHandler | None = None,
        should_render_as_json: Callable[[], bool] | None = None,
        registry: HandlerRegistry | None = None,
    ) -> None:
        self.config = config or ErrorBridgeConfig()
        self.application = application or LoggingApplicationHandler()
        self.interceptor = ErrorInterceptor.from_config(self.config.handler, self.application)
        self.trace_filter = ErrorTraceFilter(self.config.trace.max_trace_size)
        self.presenter = ErrorPresenter(
            self.trace_filter,
            debug=self.config.presenter.debug,
            should_render_as_json=should_render_as_json,
        )
        self._registry = registry or default_registry

    @classmethod
    def from_file(
        cls,
        path: str | Path | None = None,
        overrides: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ErrorHandler:
        """从 YAML 配置文件创建实例。"""
        return cls(load_config(path, overrides), **kwargs)

    def install(self) -> None:
        """安装拦截器与异常钩子。"""
        self._registry.install(self.interceptor, self.excepthook)
        logger.info(
            "Error Bridge 已安装（convert_error_to_exception=%s, max_trace_size=%d）",
            self.config.handler.convert_error_to_exception,
            self.config.trace.max_trace_size,
        )

    def restore(self) -> None:
        """恢复安装前的处理器。"""
        self._registry.restore()

    @contextmanager
    def installed(self) -> Iterator[ErrorHandler]:
        """在 with 块内安装，退出时恢复。"""
        self.install()
        try:
            yield self
        finally:
            self.restore()

    def excepthook(
        self,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> None:
        """``sys.excepthook`` 兼容入口，转交应用级处理器。"""
        self.application.handle_exception(exc.with_traceback(tb))

    def render(self, request: Request, exc: BaseException) -> Response:
        """渲染错误响应。"""
        return self.presenter.render(request, exc)

    def __repr__(self) -> str:
        return f"ErrorHandler(interceptor={self.interceptor!r}, trace_filter={self.trace_filter!r})"
