"""
调用栈采集与简化。
"""

from error_bridge.trace.filter import DEFAULT_MAX_TRACE_SIZE, ErrorTraceFilter
from error_bridge.trace.frames import (
    SimplifiedStackFrame,
    StackFrame,
    capture_stack,
    frame_arguments,
    frames_from_traceback,
)
from error_bridge.trace.simplify import simplify_argument, simplify_arguments

__all__ = [
    "DEFAULT_MAX_TRACE_SIZE",
    "ErrorTraceFilter",
    "SimplifiedStackFrame",
    "StackFrame",
    "capture_stack",
    "frame_arguments",
    "frames_from_traceback",
    "simplify_argument",
    "simplify_arguments",
]
