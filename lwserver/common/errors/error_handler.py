import logging
from typing import Optional

from lwserver.common.logging import init_logger

from .base import AppError
from .errors import Errors
from .types import ErrorCategory


class BaseErrorHandler:
    """错误处理器基类"""

    def handle(self, error: BaseException) -> AppError:
        """处理异常并返回应用错误"""
        return Errors.wrap(error)


class LogErrorHandler(BaseErrorHandler):
    """日志错误处理器，记录错误到日志系统"""

    def __init__(self,
                 logger: Optional[logging.Logger] = None,
                 include_traceback: bool = False,
                 log_level: int = logging.ERROR):
        self.logger = logger or init_logger("errors/logging")
        self.include_traceback = include_traceback
        self.log_level = log_level

    def handle(self, error: BaseException) -> AppError:
        """处理异常并记录到日志"""
        app_error = super().handle(error)

        message = f"[{app_error.info.code}] {app_error.message}"

        extra = {
            "error_code": app_error.info.code,
            "trace_id": app_error.context.trace_id,
            "category": app_error.info.category.value
        }

        # 配置错误本身已足够说明问题，未知错误总是附带traceback
        exc_info = None
        if self.include_traceback or app_error.info.category is ErrorCategory.SYSTEM:
            exc_info = app_error.context.cause

        self.logger.log(self.log_level, message, extra=extra, exc_info=exc_info)

        return app_error
