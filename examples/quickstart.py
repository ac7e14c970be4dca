"""
Error Bridge 快速上手示例。

演示三种结局：警告转异常、转换关闭后交给应用级处理器、
字符串转换方法中的信号直接交给 handle_exception()。

运行方式：
    python examples/quickstart.py
"""

from error_bridge import (
    ErrorBridgeConfig,
    ErrorException,
    ErrorHandler,
    Severity,
    trigger_error,
)
from error_bridge.config import HandlerConfig, TraceConfig


class Invoice:
    def __init__(self, number: str, password: str) -> None:
        self.number = number
        self.password = password

    def __str__(self) -> str:
        trigger_error(f"发票 {self.number} 缺少税号", Severity.USER_NOTICE)
        return f"Invoice({self.number})"


def charge(invoice: Invoice, amount: float, *, currency: str = "CNY") -> None:
    if amount > 1000:
        trigger_error("单笔金额超过风控阈值", Severity.USER_WARNING)


def main() -> None:
    # ===== 场景 1：警告转异常 =====
    print("=" * 60)
    print("场景 1：警告转异常")
    print("=" * 60)

    handler = ErrorHandler(ErrorBridgeConfig(trace=TraceConfig(max_trace_size=3)))
    with handler.installed():
        try:
            charge(Invoice("INV-001", "s3cret"), 2000.0)
        except ErrorException as exc:
            print(f"\n捕获：{exc}（{Severity(exc.code).name}）")
            for frame in handler.trace_filter.filter_exception(exc):
                print(f"  {frame.function}({frame.args})  {frame.filename}:{frame.lineno}")

    # ===== 场景 2：转换关闭 =====
    print("\n" + "=" * 60)
    print("场景 2：转换关闭，交给应用级处理器写日志")
    print("=" * 60)

    quiet = ErrorHandler(ErrorBridgeConfig(handler=HandlerConfig(convert_error_to_exception=False)))
    with quiet.installed():
        charge(Invoice("INV-002", "s3cret"), 5000.0)
    print("\n执行继续，警告已写入日志")

    # ===== 场景 3：字符串转换方法中的信号 =====
    print("\n" + "=" * 60)
    print("场景 3：__str__ 中的信号不抛出")
    print("=" * 60)

    safe = ErrorHandler(ErrorBridgeConfig(handler=HandlerConfig(raise_in_string_conversion=False)))
    with safe.installed():
        print(f"\n渲染结果：{Invoice('INV-003', 's3cret')}")


if __name__ == "__main__":
    main()
