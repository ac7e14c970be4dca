"""
CLI 命令单元测试。

测试 CLI 子命令：validate, run。
使用 typer.testing.CliRunner 进行测试。
"""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from error_bridge.cli.app import app
from error_bridge.cli.utils import build_trace_table
from error_bridge.handler import default_registry
from error_bridge.trace import SimplifiedStackFrame

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """切换到临时目录，避免自动搜索到其他配置文件。"""
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _script(directory: Path, name: str, body: str) -> str:
    (directory / name).write_text(body, encoding="utf-8")
    return name


# ============================================================
# validate
# ============================================================


class TestValidate:
    """validate 命令。"""

    def test_valid_file(self, workdir: Path) -> None:
        (workdir / "error_bridge.yaml").write_text("trace:\n  max_trace_size: 5\n", encoding="utf-8")

        result = runner.invoke(app, ["validate"])

        assert result.exit_code == 0
        assert "校验通过" in result.output

    def test_invalid_file(self, workdir: Path) -> None:
        (workdir / "bad.yaml").write_text("trace:\n  max_trace_size: 0\n", encoding="utf-8")

        result = runner.invoke(app, ["validate", "bad.yaml"])

        assert result.exit_code == 1
        assert "校验失败" in result.output

    def test_missing_file(self, workdir: Path) -> None:
        result = runner.invoke(app, ["validate", "missing.yaml"])

        assert result.exit_code == 1
        assert "文件不存在" in result.output


# ============================================================
# run
# ============================================================


class TestRun:
    """run 命令。"""

    def test_script_completes(self, workdir: Path) -> None:
        script = _script(workdir, "ok.py", "total = sum(range(10))\n")

        result = runner.invoke(app, ["run", script])

        assert result.exit_code == 0
        assert "执行完毕" in result.output
        assert default_registry.depth == 0

    def test_warning_is_reported(self, workdir: Path) -> None:
        script = _script(workdir, "warn.py", (
            "from error_bridge import Severity, trigger_error\n"
            "\n"
            "def check_quota(used):\n"
            "    trigger_error('quota low', Severity.USER_WARNING)\n"
            "\n"
            "check_quota(95)\n"
        ))

        result = runner.invoke(app, ["run", script])

        assert result.exit_code == 1
        assert "USER_WARNING" in result.output
        assert "quota low" in result.output
        assert "调用栈" in result.output
        assert default_registry.depth == 0

    def test_plain_exception_is_reported(self, workdir: Path) -> None:
        script = _script(workdir, "crash.py", "raise KeyError('gone')\n")

        result = runner.invoke(app, ["run", script])

        assert result.exit_code == 1
        assert "KeyError" in result.output

    def test_script_arguments(self, workdir: Path) -> None:
        script = _script(workdir, "argv.py", "import sys\nprint('args:', ' '.join(sys.argv[1:]))\n")

        result = runner.invoke(app, ["run", script, "alpha", "beta"])

        assert result.exit_code == 0
        assert "args: alpha beta" in result.output

    def test_config_disables_conversion(self, workdir: Path) -> None:
        (workdir / "quiet.yaml").write_text(
            "handler:\n  convert_error_to_exception: false\n", encoding="utf-8"
        )
        script = _script(workdir, "warn.py", (
            "from error_bridge import Severity, trigger_error\n"
            "trigger_error('only logged', Severity.USER_WARNING)\n"
        ))

        result = runner.invoke(app, ["run", script, "--config", "quiet.yaml"])

        assert result.exit_code == 0

    def test_invalid_config(self, workdir: Path) -> None:
        (workdir / "bad.yaml").write_text("trace: [\n", encoding="utf-8")
        script = _script(workdir, "ok.py", "pass\n")

        result = runner.invoke(app, ["run", script, "-c", "bad.yaml"])

        assert result.exit_code == 1
        assert "YAML" in result.output

    def test_missing_script(self, workdir: Path) -> None:
        result = runner.invoke(app, ["run", "missing.py"])

        assert result.exit_code == 1
        assert "脚本不存在" in result.output

    def test_max_trace_size_must_be_positive(self, workdir: Path) -> None:
        script = _script(workdir, "ok.py", "pass\n")

        result = runner.invoke(app, ["run", script, "-n", "0"])

        assert result.exit_code == 2


# ============================================================
# 工具函数
# ============================================================


def test_build_trace_table() -> None:
    """测试调用栈表格。"""
    table = build_trace_table([
        SimplifiedStackFrame(function="main", filename="app.py", lineno=3, args="1, 'x'"),
        SimplifiedStackFrame(function="<module>"),
    ])

    assert table.row_count == 2
    assert [column.header for column in table.columns] == ["#", "函数", "位置", "参数"]
