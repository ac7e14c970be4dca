"""
Web 层：错误响应渲染与 FastAPI 集成。
"""

from error_bridge.web.integration import error_bridge_lifespan, register_error_handlers
from error_bridge.web.presenter import JSON_MEDIA_TYPE, ErrorJSONResponse, ErrorPresenter

__all__ = [
    "JSON_MEDIA_TYPE",
    "ErrorJSONResponse",
    "ErrorPresenter",
    "error_bridge_lifespan",
    "register_error_handlers",
]
