"""
FastAPI 集成。

用法::

    handler = ErrorHandler(config)
    app = FastAPI(lifespan=error_bridge_lifespan(handler))
    register_error_handlers(app, handler.presenter)

应用启动时安装拦截器，关闭时恢复；请求处理中发出的警告会变成
``ErrorException``，再由全局异常处理器渲染为 JSON 或 HTML。
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from error_bridge.web.presenter import ErrorPresenter

if TYPE_CHECKING:
    from error_bridge.facade import ErrorHandler


def register_error_handlers(app: FastAPI, presenter: ErrorPresenter) -> None:
    """
    在 FastAPI 应用上注册全局异常处理器。

    Args:
        app: FastAPI 应用实例
        presenter: 错误响应渲染器
    """

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
        """处理 HTTP 异常（404、405 等）。"""
        return presenter.render(request, exc)

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> Response:
        """处理未捕获异常，包括由警告转换而来的 ErrorException。"""
        return presenter.render(request, exc)


def error_bridge_lifespan(
    handler: ErrorHandler,
) -> Callable[[FastAPI], Any]:
    """返回在应用生命周期内安装拦截器的 lifespan。"""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        handler.install()
        try:
            yield
        finally:
            handler.restore()

    return lifespan
