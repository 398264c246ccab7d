from .base import AppError
from .registry import ErrorRegistry


class Errors:
    """统一错误处理工具类"""

    @staticmethod
    def _get_registry() -> ErrorRegistry:
        return ErrorRegistry()

    @classmethod
    def wrap(cls, exception: BaseException, code: str = "SYSTEM/UNKNOWN") -> AppError:
        """包装一个普通异常为应用错误，应用错误原样返回"""
        if isinstance(exception, AppError):
            return exception

        error_info = cls._get_registry().get_or_unknown(code)
        return AppError.from_exception(exception, error_info)
