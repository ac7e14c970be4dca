"""
配置的 Schema 定义与校验。

YAML 配置文件反序列化为 ``ErrorBridgeConfig``。每个字段都有默认值，
不提供配置文件时整个库按默认行为工作。
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from error_bridge.severity import Severity


class HandlerConfig(BaseModel):
    """拦截器配置。"""

    convert_error_to_exception: bool = Field(
        default=True,
        description="是否把运行时警告信号转换为 ErrorException",
    )
    raise_in_string_conversion: bool = Field(
        default=True,
        description="运行环境是否支持在 __str__ / __repr__ / __format__ 中抛出异常",
    )
    error_reporting: int = Field(
        default=int(Severity.ALL),
        description="拦截器接管的严重级别掩码，可写作整数、级别名或级别名列表",
        ge=0,
    )

    @field_validator("error_reporting", mode="before")
    @classmethod
    def _parse_error_reporting(cls, value: Any) -> Any:
        """把级别名（如 "USER_WARNING"）或级别名列表转换为整数掩码。"""
        if isinstance(value, str):
            value = [value]
        if isinstance(value, (list, tuple)):
            mask = 0
            for item in value:
                if isinstance(item, str):
                    try:
                        mask |= Severity[item.strip().upper()]
                    except KeyError:
                        valid = ", ".join(member.name for member in Severity)
                        raise ValueError(f"未知的严重级别 '{item}'，可选值：{valid}") from None
                else:
                    mask |= int(item)
            return int(mask)
        return value


class TraceConfig(BaseModel):
    """调用栈简化配置。"""

    max_trace_size: int = Field(
        default=10,
        description="错误响应中展示的最大调用栈帧数",
        gt=0,
    )


class PresenterConfig(BaseModel):
    """错误展示配置。"""

    debug: bool = Field(
        default=False,
        description="调试模式：错误响应中包含消息、位置和简化调用栈",
    )


class ErrorBridgeConfig(BaseModel):
    """
    完整配置，对应 YAML 配置文件的根结构。

    YAML 文件示例::

        version: "1.0"
        handler:
          convert_error_to_exception: true
          error_reporting: [WARNING, USER_WARNING, USER_NOTICE]
        trace:
          max_trace_size: 10
        presenter:
          debug: false
    """

    version: str = Field(default="1.0", description="配置版本")

    handler: HandlerConfig = Field(default_factory=HandlerConfig)
    trace: TraceConfig = Field(default_factory=TraceConfig)
    presenter: PresenterConfig = Field(default_factory=PresenterConfig)
