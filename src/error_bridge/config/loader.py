"""
error_bridge 配置文件的加载与校验。

配置文件由 ``handler`` / ``trace`` / ``presenter`` 三个段和可选的 ``version`` 组成。
加载流程：

1. 定位文件：显式路径，或在当前目录依次查找 ``DEFAULT_CONFIG_FILES``
2. 读取 YAML，根元素必须是映射
3. 检查段名，拼错的段给出最接近的候选
4. 按段合并运行时覆盖项
5. Pydantic 校验，错误按 ``段.字段`` 报告，并附上该字段的取值说明
"""

from __future__ import annotations

import difflib
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from error_bridge.config.schema import ErrorBridgeConfig
from error_bridge.errors import ConfigLoadError, ConfigValidationError
from error_bridge.severity import Severity

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILES = (
    Path("error_bridge.yaml"),
    Path("error_bridge.yml"),
    Path(".error_bridge/config.yaml"),
)

SECTIONS = ("handler", "trace", "presenter")

_BOOLEAN_HINT = "布尔值 true / false"

_FIELD_HINTS = {
    "handler.convert_error_to_exception": _BOOLEAN_HINT,
    "handler.raise_in_string_conversion": _BOOLEAN_HINT,
    "handler.error_reporting": (
        "严重级别名、级别名列表或非负整数掩码；可选级别："
        + ", ".join(member.name for member in Severity)
    ),
    "trace.max_trace_size": "正整数，默认 10",
    "presenter.debug": _BOOLEAN_HINT,
}


def find_config_file(directory: str | Path | None = None) -> Path | None:
    """在目录（默认当前目录）中查找第一个存在的默认配置文件。"""
    base = Path(directory) if directory is not None else Path()
    for candidate in DEFAULT_CONFIG_FILES:
        path = base / candidate
        if path.is_file():
            return path
    return None


def load_config(
    path: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> ErrorBridgeConfig:
    """
    加载并校验配置。

    参数:
        path: YAML 文件路径。None 时查找默认文件，找不到则使用默认配置。
        overrides: 按段覆盖的配置项，例如 ``{"trace": {"max_trace_size": 5}}``

    返回:
        ErrorBridgeConfig 实例

    异常:
        ConfigLoadError: 文件无法读取或不是合法的 YAML 映射
        ConfigValidationError: 段名未知或字段取值不合法
    """
    source = Path(path) if path is not None else find_config_file()
    if source is None:
        logger.info("未找到配置文件，使用默认配置。")
        raw: dict[str, Any] = {}
        label = "<default>"
    else:
        logger.info("加载配置文件：%s", source)
        raw = read_config_file(source)
        label = str(source)

    unknown = _unknown_sections(raw)
    if unknown:
        key = unknown[0]
        raise ConfigValidationError(
            what=f"配置 '{label}' 包含未知的段 '{key}'。",
            why="未知段中的设置不会生效。",
            how=_section_suggestion(key),
            source=label,
            field_path=key,
        )

    if overrides:
        raw = merge_overrides(raw, overrides)

    try:
        return ErrorBridgeConfig.model_validate(raw)
    except ValidationError as e:
        problems = [_describe_error(error) for error in e.errors()]
        first_field = _field_path(e.errors()[0]["loc"]) if e.errors() else ""
        raise ConfigValidationError(
            what=f"配置 '{label}' 中有 {len(problems)} 个字段取值不合法。",
            why="\n".join(problems),
            how=_FIELD_HINTS.get(first_field, "可以先运行 'error-bridge validate <path>' 查看全部问题。"),
            source=label,
            field_path=first_field,
        ) from e


def read_config_file(path: Path) -> dict[str, Any]:
    """读取 YAML 配置文件，返回根映射；空文件返回空字典。"""
    if not path.is_file():
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 不存在。",
            how="检查路径，或省略路径以使用默认配置。",
            source=str(path),
        )

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigLoadError(
            what=f"无法读取配置文件 '{path}'。",
            why=str(e),
            how="确认文件可读且使用 UTF-8 编码。",
            source=str(path),
        ) from e
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 不是合法的 YAML" + (f"（第 {line} 行）。" if line else "。"),
            why=getattr(e, "problem", None) or str(e),
            how="检查缩进与括号是否成对。",
            source=str(path),
            line=line,
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigLoadError(
            what=f"配置文件 '{path}' 的根元素必须是映射。",
            why=f"实际为 {type(data).__name__}。",
            how="顶层只写 version 与 " + " / ".join(SECTIONS) + " 段。",
            source=str(path),
        )
    return data


def merge_overrides(raw: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    """按段合并覆盖项：同名段内逐字段覆盖，其余键整体替换。"""
    merged = dict(raw)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = {**current, **value}
        else:
            merged[key] = value
    return merged


def validate_config_file(path: str | Path) -> list[str]:
    """
    校验配置文件，返回全部问题。

    与 ``load_config()`` 不同，本函数不抛出异常，且不会在第一个问题处停止，
    供 CLI 的 validate 命令使用。空列表表示校验通过。
    """
    try:
        raw = read_config_file(Path(path))
    except ConfigLoadError as e:
        return [str(e)]

    problems = [
        f"{key}: 未知的段，{_section_suggestion(key)}" for key in _unknown_sections(raw)
    ]
    try:
        ErrorBridgeConfig.model_validate(raw)
    except ValidationError as e:
        problems.extend(_describe_error(error) for error in e.errors())
    return problems


def _unknown_sections(raw: dict[str, Any]) -> list[str]:
    known = ErrorBridgeConfig.model_fields
    return [str(key) for key in raw if key not in known]


def _section_suggestion(key: str) -> str:
    matches = difflib.get_close_matches(key, SECTIONS, n=1)
    if matches:
        return f"是否想写 '{matches[0]}'？"
    return "可用的段：" + ", ".join(SECTIONS) + "。"


def _field_path(loc: tuple[Any, ...]) -> str:
    return ".".join(str(part) for part in loc)


def _describe_error(error: dict[str, Any]) -> str:
    field = _field_path(error["loc"])
    text = f"{field}: {error['msg']}"
    hint = _FIELD_HINTS.get(field)
    if hint:
        text += f"（{hint}）"
    return text
