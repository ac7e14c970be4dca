"""
处理器注册表单元测试。

覆盖范围:
- handler/registry.py: HandlerRegistry.install() / restore() / installed()
"""

from __future__ import annotations

import sys
import warnings

import pytest

from error_bridge.errors import ErrorException, HandlerRegistrationError
from error_bridge.handler import ErrorInterceptor, HandlerRegistry
from error_bridge.severity import Severity, trigger_error


def _hook(exc_type, exc, tb) -> None:
    pass


class TestInstall:
    """安装与恢复。"""

    def test_install_replaces_showwarning(self, registry, interceptor) -> None:
        original = warnings.showwarning

        registry.install(interceptor)
        assert warnings.showwarning == interceptor.showwarning
        assert registry.active is interceptor
        assert registry.depth == 1

        registry.restore()
        assert warnings.showwarning is original
        assert registry.active is None
        assert registry.depth == 0

    def test_restore_stops_conversion(self, registry, interceptor) -> None:
        registry.install(interceptor)
        registry.restore()

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger_error("after restore", Severity.USER_WARNING)

        assert [str(w.message) for w in caught] == ["after restore"]

    def test_excepthook_is_replaced_and_restored(self, registry, interceptor) -> None:
        original = sys.excepthook

        with registry.installed(interceptor, _hook):
            assert sys.excepthook is _hook

        assert sys.excepthook is original

    def test_excepthook_untouched_by_default(self, registry, interceptor) -> None:
        original = sys.excepthook

        with registry.installed(interceptor):
            assert sys.excepthook is original

    def test_nested_installations_restore_in_order(self, registry, application) -> None:
        outer = ErrorInterceptor(application)
        inner = ErrorInterceptor(application, convert_error_to_exception=False)

        with registry.installed(outer):
            with registry.installed(inner):
                assert registry.active is inner
                assert registry.depth == 2
                trigger_error("forwarded", Severity.USER_WARNING)

            assert registry.active is outer
            with pytest.raises(ErrorException):
                trigger_error("raised", Severity.USER_WARNING)

        assert [error[1] for error in application.errors] == ["forwarded"]

    def test_installed_restores_after_exception(self, registry, interceptor) -> None:
        with pytest.raises(ErrorException):
            with registry.installed(interceptor):
                trigger_error("escaping", Severity.USER_WARNING)

        assert registry.depth == 0

    def test_installed_yields_interceptor(self, registry, interceptor) -> None:
        with registry.installed(interceptor) as active:
            assert active is interceptor


class TestRestoreErrors:
    """不成对的 restore()。"""

    def test_restore_without_install(self) -> None:
        with pytest.raises(HandlerRegistrationError) as exc_info:
            HandlerRegistry().restore()

        assert "处理器栈为空" in exc_info.value.why
        assert exc_info.value.how

    def test_restore_all(self, registry, interceptor) -> None:
        registry.install(interceptor)
        registry.install(interceptor)

        registry.restore_all()

        assert registry.depth == 0
        with pytest.raises(HandlerRegistrationError):
            registry.restore()
