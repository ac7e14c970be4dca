"""
错误展示：决定以 JSON 还是 HTML 页面返回错误，并组装响应。

JSON 响应结构::

    {"error": "Internal Server Error", "code": 500}

调试模式下追加 ``type`` / ``message`` / ``file`` / ``line`` / ``traces``，
其中 ``traces`` 是经过 ``ErrorTraceFilter`` 简化的有界调用栈。
"""

from __future__ import annotations

import html
import json
import logging
from collections.abc import Callable, Mapping
from http import HTTPStatus
from typing import Any

from fastapi import Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from error_bridge.errors import ErrorException
from error_bridge.trace.filter import ErrorTraceFilter

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


class ErrorJSONResponse(JSONResponse):
    """保留非 ASCII 字符的 JSON 响应，可选缩进；无法序列化的值转为字符串。"""

    media_type = JSON_MEDIA_TYPE

    def __init__(
        self,
        content: Any,
        status_code: int = 500,
        headers: Mapping[str, str] | None = None,
        *,
        indent: int | None = None,
    ) -> None:
        # render() 在父类构造函数中调用
        self.indent = indent
        super().__init__(content, status_code=status_code, headers=headers)

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            indent=self.indent,
            default=str,
        ).encode("utf-8")


class ErrorPresenter:
    """
    错误响应渲染器。

    Examples:
        >>> presenter = ErrorPresenter(debug=True)
        >>> presenter.should_render_as_json({"Accept": "application/json"})
        True
        >>> presenter = ErrorPresenter(should_render_as_json=lambda: True)
        >>> presenter.should_render_as_json({"Accept": "text/html"})
        True
    """

    def __init__(
        self,
        trace_filter: ErrorTraceFilter | None = None,
        *,
        debug: bool = False,
        should_render_as_json: Callable[[], bool] | None = None,
    ) -> None:
        """
        Args:
            trace_filter: 调用栈简化器
            debug: 调试模式
            should_render_as_json: 注入的判定函数，设置后优先于 Accept 请求头
        """
        self.trace_filter = trace_filter or ErrorTraceFilter()
        self.debug = debug
        self._should_render_as_json = should_render_as_json

    def should_render_as_json(self, headers: Mapping[str, str] | None = None) -> bool:
        """
        是否以 JSON 格式返回错误。

        注入的判定函数优先；否则当 Accept 请求头（不区分大小写）
        等于 ``application/json`` 时返回 True。
        """
        if self._should_render_as_json is not None:
            return bool(self._should_render_as_json())

        accept = _get_header(headers, "accept")
        return accept is not None and accept.lower() == "application/json"

    def render(self, request: Request, exc: BaseException) -> Response:
        """根据请求渲染错误响应。"""
        status_code = status_code_for(exc)
        if status_code >= 500:
            logger.error(
                "%s %s 处理失败：%s",
                request.method,
                request.url.path,
                type(exc).__name__,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

        if self.should_render_as_json(request.headers):
            return self.render_json(exc, status_code)
        return self.render_html(exc, status_code)

    def render_json(self, exc: BaseException, status_code: int) -> ErrorJSONResponse:
        """渲染 JSON 响应，调试模式下缩进输出。"""
        return ErrorJSONResponse(
            self.build_payload(exc, status_code),
            status_code=status_code,
            headers=_exception_headers(exc),
            indent=2 if self.debug else None,
        )

    def render_html(self, exc: BaseException, status_code: int) -> HTMLResponse:
        """渲染最简 HTML 错误页。"""
        title = html.escape(reason_phrase(status_code))
        body = [f"<h1>{status_code} {title}</h1>"]
        if self.debug:
            filename, lineno = error_location(exc)
            body.append(f"<p>{html.escape(type(exc).__qualname__)}: {html.escape(str(exc))}</p>")
            if filename is not None:
                body.append(f"<p>{html.escape(filename)}:{lineno}</p>")

        page = (
            "<!DOCTYPE html>\n<html><head><meta charset=\"utf-8\">"
            f"<title>{title}</title></head><body>{''.join(body)}</body></html>"
        )
        return HTMLResponse(page, status_code=status_code, headers=_exception_headers(exc))

    def build_payload(self, exc: BaseException, status_code: int) -> dict[str, Any]:
        """
        组装 JSON 响应体。

        非调试模式只包含 ``error`` 与 ``code``；调试模式下才调用调用栈简化。
        """
        payload: dict[str, Any] = {
            "error": reason_phrase(status_code),
            "code": status_code,
        }
        if not self.debug:
            return payload

        filename, lineno = error_location(exc)
        payload["type"] = type(exc).__qualname__
        payload["message"] = str(exc)
        payload["file"] = filename
        payload["line"] = lineno
        payload["traces"] = [frame.to_dict() for frame in self.trace_filter.filter_exception(exc)]
        return payload


def status_code_for(exc: BaseException) -> int:
    """HTTPException 使用其状态码，其余异常为 500。"""
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code
    return 500


def reason_phrase(status_code: int) -> str:
    """返回状态码对应的标准短语。"""
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_location(exc: BaseException) -> tuple[str | None, int | None]:
    """返回错误发生的源文件与行号。"""
    if isinstance(exc, ErrorException):
        return exc.filename, exc.lineno

    tb = exc.__traceback__
    if tb is None:
        return None, None
    while tb.tb_next is not None:
        tb = tb.tb_next
    return tb.tb_frame.f_code.co_filename, tb.tb_lineno


def _get_header(headers: Mapping[str, str] | None, name: str) -> str | None:
    if headers is None:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _exception_headers(exc: BaseException) -> dict[str, str] | None:
    if isinstance(exc, StarletteHTTPException):
        return exc.headers
    return None
