"""
测试套件共享 Fixtures 和配置。
"""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from error_bridge.handler import ErrorInterceptor, HandlerRegistry
from error_bridge.severity import error_reporting
from error_bridge.trace import StackFrame


class RecordingApplicationHandler:
    """记录所有调用的应用级处理器。"""

    def __init__(self) -> None:
        self.errors: list[tuple[int, str, str, int]] = []
        self.exceptions: list[BaseException] = []

    def handle_error(self, severity: int, message: str, filename: str, lineno: int) -> None:
        self.errors.append((severity, message, filename, lineno))

    def handle_exception(self, exc: BaseException) -> None:
        self.exceptions.append(exc)


@pytest.fixture(autouse=True)
def _restore_error_reporting() -> Iterator[None]:
    """每个测试结束后恢复进程级错误报告掩码。"""
    previous = error_reporting()
    yield
    error_reporting(previous)


@pytest.fixture
def registry() -> Iterator[HandlerRegistry]:
    """独立的处理器注册表，测试结束后全部恢复。"""
    registry = HandlerRegistry()
    yield registry
    registry.restore_all()


@pytest.fixture
def application() -> RecordingApplicationHandler:
    return RecordingApplicationHandler()


@pytest.fixture
def interceptor(application: RecordingApplicationHandler) -> ErrorInterceptor:
    return ErrorInterceptor(application)


@pytest.fixture
def sample_trace() -> list[StackFrame]:
    """12 帧的调用栈，最内层在前。"""
    return [
        StackFrame(
            function=f"level_{index}",
            filename=f"/srv/app/module_{index}.py",
            lineno=index + 1,
            args=((0, index), (1, "x" * 80)) if index % 2 == 0 else None,
        )
        for index in range(12)
    ]
