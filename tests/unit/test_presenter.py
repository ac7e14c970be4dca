"""
错误展示单元测试。

覆盖范围:
- web/presenter.py: ErrorPresenter.should_render_as_json(), build_payload(),
  render_json(), render_html()
- web/presenter.py: ErrorJSONResponse
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest
from starlette.exceptions import HTTPException as StarletteHTTPException

from error_bridge.errors import ErrorException
from error_bridge.severity import Severity
from error_bridge.trace import ErrorTraceFilter, StackFrame
from error_bridge.web.presenter import (
    JSON_MEDIA_TYPE,
    ErrorJSONResponse,
    ErrorPresenter,
    error_location,
    reason_phrase,
    status_code_for,
)


def _raise_value_error() -> ValueError:
    try:
        raise ValueError("bad <input>")
    except ValueError as exc:
        return exc


# === 渲染方式判定 ===


class TestShouldRenderAsJson:
    """Accept 请求头与注入判定。"""

    @pytest.mark.parametrize(
        ("headers", "expected"),
        [
            ({"Accept": "application/json"}, True),
            ({"accept": "APPLICATION/JSON"}, True),
            ({"Accept": "text/html"}, False),
            ({"Accept": "application/json, text/html"}, False),
            ({}, False),
            (None, False),
        ],
    )
    def test_accept_header(self, headers, expected: bool) -> None:
        assert ErrorPresenter().should_render_as_json(headers) is expected

    def test_injected_predicate_overrides_header(self) -> None:
        presenter = ErrorPresenter(should_render_as_json=lambda: True)
        assert presenter.should_render_as_json({"Accept": "text/html"}) is True
        assert presenter.should_render_as_json(None) is True

    def test_injected_false_overrides_header(self) -> None:
        presenter = ErrorPresenter(should_render_as_json=lambda: False)
        assert presenter.should_render_as_json({"Accept": "application/json"}) is False


# === 响应体 ===


class TestBuildPayload:
    """JSON 响应体结构。"""

    def test_production_payload(self) -> None:
        trace_filter = MagicMock(spec=ErrorTraceFilter)
        presenter = ErrorPresenter(trace_filter)

        payload = presenter.build_payload(RuntimeError("secret"), 500)

        assert payload == {"error": "Internal Server Error", "code": 500}
        trace_filter.filter_exception.assert_not_called()

    def test_debug_payload(self) -> None:
        frames = tuple(
            StackFrame(function=f"f{i}", filename="app.py", lineno=i, args=((0, "a" * 100),))
            for i in range(5)
        )
        exc = ErrorException("配额即将耗尽", Severity.USER_WARNING, "app.py", 42, trace=frames)
        presenter = ErrorPresenter(ErrorTraceFilter(max_trace_size=2), debug=True)

        payload = presenter.build_payload(exc, 500)

        assert payload["error"] == "Internal Server Error"
        assert payload["code"] == 500
        assert payload["type"] == "ErrorException"
        assert payload["message"] == "配额即将耗尽"
        assert payload["file"] == "app.py"
        assert payload["line"] == 42
        assert payload["traces"] == [
            {"function": "f0", "file": "app.py", "line": 0, "args": "'" + "a" * 64 + "...'"},
            {"function": "f1", "file": "app.py", "line": 1, "args": "'" + "a" * 64 + "...'"},
        ]

    def test_debug_payload_for_plain_exception(self) -> None:
        exc = _raise_value_error()
        payload = ErrorPresenter(debug=True).build_payload(exc, 500)

        assert payload["file"] == __file__
        assert payload["traces"][0]["function"] == "_raise_value_error"

    def test_http_exception_status(self) -> None:
        payload = ErrorPresenter().build_payload(StarletteHTTPException(404), 404)
        assert payload == {"error": "Not Found", "code": 404}


# === 响应对象 ===


class TestResponses:
    """JSON 与 HTML 响应。"""

    def test_json_response(self) -> None:
        response = ErrorPresenter().render_json(RuntimeError("x"), 500)

        assert response.status_code == 500
        assert response.headers["content-type"] == JSON_MEDIA_TYPE
        assert json.loads(response.body) == {"error": "Internal Server Error", "code": 500}

    def test_json_response_class(self) -> None:
        response = ErrorPresenter().render_json(RuntimeError("x"), 500)

        assert isinstance(response, ErrorJSONResponse)
        assert b"\n" not in response.body

    def test_debug_json_is_indented_and_keeps_unicode(self) -> None:
        exc = ErrorException("配额即将耗尽", Severity.USER_WARNING, "app.py", 3)
        response = ErrorPresenter(debug=True).render_json(exc, 500)

        assert response.body.startswith(b'{\n  "error"')
        assert "配额即将耗尽".encode() in response.body

    def test_unserializable_values_become_strings(self) -> None:
        response = ErrorJSONResponse({"severity": Severity.USER_WARNING, "value": object}, status_code=500)

        assert json.loads(response.body)["value"] == "<class 'object'>"
        assert response.headers["content-type"] == JSON_MEDIA_TYPE

    def test_json_response_keeps_exception_headers(self) -> None:
        exc = StarletteHTTPException(401, headers={"WWW-Authenticate": "Bearer"})
        response = ErrorPresenter().render_json(exc, 401)
        assert response.headers["www-authenticate"] == "Bearer"

    def test_html_response_hides_details(self) -> None:
        response = ErrorPresenter().render_html(_raise_value_error(), 500)

        body = response.body.decode("utf-8")
        assert response.status_code == 500
        assert "500 Internal Server Error" in body
        assert "bad" not in body

    def test_html_debug_escapes_message(self) -> None:
        response = ErrorPresenter(debug=True).render_html(_raise_value_error(), 500)

        body = response.body.decode("utf-8")
        assert "bad &lt;input&gt;" in body
        assert "<input>" not in body


# === 辅助函数 ===


class TestHelpers:
    """状态码与位置推断。"""

    def test_status_code_for(self) -> None:
        assert status_code_for(StarletteHTTPException(418)) == 418
        assert status_code_for(RuntimeError()) == 500

    def test_reason_phrase(self) -> None:
        assert reason_phrase(404) == "Not Found"
        assert reason_phrase(599) == "Error"

    def test_error_location_without_traceback(self) -> None:
        assert error_location(RuntimeError()) == (None, None)

    def test_error_location_for_error_exception(self) -> None:
        assert error_location(ErrorException("x", 2, "a.py", 5)) == ("a.py", 5)
