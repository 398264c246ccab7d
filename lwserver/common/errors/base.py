from typing import Any, ClassVar, Dict, Optional

from .types import ErrorContext, ErrorInfo


class AppError(Exception):
    """统一应用错误类，所有启动错误都通过此类及其子类表示

    子类可以通过类属性 ``info`` 绑定默认的错误定义
    """

    info: ClassVar[Optional[ErrorInfo]] = None

    def __init__(
            self,
            info: Optional[ErrorInfo] = None,
            context: Optional[ErrorContext] = None,
            **kwargs
    ):
        info = info or type(self).info
        if info is None:
            raise TypeError(f"{type(self).__name__} 未绑定错误定义")

        self.info = info
        self.context = context or ErrorContext()
        self.params = kwargs

        # 格式化消息
        self.message = info.message
        if kwargs:
            try:
                self.message = info.message.format(**kwargs)
            except (KeyError, ValueError, IndexError):
                # 格式化失败，保留原始消息
                pass

        super().__init__(self.message)

    @property
    def exit_code(self) -> int:
        return self.info.exit_code

    @classmethod
    def from_exception(cls, exception: BaseException, error_info: ErrorInfo) -> 'AppError':
        """从普通异常创建应用错误，原始异常保存在上下文的 cause 中"""
        context = ErrorContext().with_data(
            cause=exception,
            exception_type=type(exception).__name__,
        )
        return cls(error_info, context,
                   exception_type=type(exception).__name__,
                   exception_msg=str(exception))

    def merge_context(self, context: ErrorContext) -> 'AppError':
        """合并上下文"""
        self.context = self.context.merge(context)
        return self

    def to_dict(self) -> Dict[str, Any]:
        """将错误转换为字典"""
        result = {
            "error": {
                "code": self.info.code,
                "message": self.message,
                "category": self.info.category.value,
                "exit_code": self.info.exit_code,
                "context": {
                    "trace_id": self.context.trace_id,
                    "timestamp": self.context.timestamp,
                }
            }
        }

        if self.context.metadata:
            result["error"]["context"]["metadata"] = dict(self.context.metadata)

        return result
