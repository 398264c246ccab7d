from typing import Iterable, Optional

from ..base import AppError
from ..types import ErrorCategory
from ..registry import error_group, ErrorDef


@error_group("LWSERVER/CLI")
class CliErrors:
    """命令行配置相关错误定义"""

    CONVERSION_FAILED = ErrorDef(
        code="100000",
        message="参数 {option} 的取值 '{value}' 非法: {reason}",
        exit_code=2,
        category=ErrorCategory.CONVERSION
    )

    INVALID_PORT = ErrorDef(
        code="100001",
        message="参数 {option} 的取值 '{value}' 非法: {reason}",
        exit_code=2,
        category=ErrorCategory.CONVERSION
    )

    INVALID_CID = ErrorDef(
        code="100002",
        message="参数 {option} 的取值 '{value}' 非法: {reason}",
        exit_code=2,
        category=ErrorCategory.CONVERSION
    )

    INVALID_ENDPOINT = ErrorDef(
        code="100003",
        message="参数 {option} 的取值 '{value}' 非法: {reason}",
        exit_code=2,
        category=ErrorCategory.CONVERSION
    )

    CONSOLIDATION_FAILED = ErrorDef(
        code="110000",
        message="参数组合非法 ({options}): {reason}",
        exit_code=2,
        category=ErrorCategory.CONSOLIDATION
    )

    DEFAULTS_FILE_INVALID = ErrorDef(
        code="110001",
        message="默认值文件 {path} 校验失败 ({options}): {reason}",
        exit_code=2,
        category=ErrorCategory.CONSOLIDATION
    )

    RESOURCE_UNAVAILABLE = ErrorDef(
        code="120000",
        message="参数 {option} 指定的资源 {target} 不可用: {reason}",
        exit_code=3,
        category=ErrorCategory.RESOURCE
    )


class ConversionError(AppError):
    """单个参数的取值在语法或语义上非法"""

    info = CliErrors.CONVERSION_FAILED
    reason = "无法转换"

    def __init__(self, value: str, reason: Optional[str] = None, option: Optional[str] = None):
        self.option = option
        self.value = value
        self.reason = reason or type(self).reason
        super().__init__(option=option or "<value>", value=value, reason=self.reason)

    def for_option(self, option: str) -> 'ConversionError':
        """返回绑定到具体参数名的同类错误"""
        error = type(self)(self.value, self.reason, option)
        error.merge_context(self.context)
        return error


class InvalidPortError(ConversionError):
    info = CliErrors.INVALID_PORT
    reason = "端口必须是 0-65535 之间的整数"


class InvalidCIDError(ConversionError):
    info = CliErrors.INVALID_CID
    reason = "只接受 'on'、'off' 或整数"


class InvalidEndpointError(ConversionError):
    info = CliErrors.INVALID_ENDPOINT
    reason = "无法解析为 redis://[:password@]host[:port][/db] 格式的URI"


class ConsolidationError(AppError):
    """各自合法的参数组合成了非法的整体配置"""

    info = CliErrors.CONSOLIDATION_FAILED

    def __init__(self, options: Iterable[str], reason: str, **kwargs):
        self.options = tuple(options)
        self.reason = reason
        super().__init__(options=", ".join(self.options), reason=reason, **kwargs)


class DefaultsFileError(ConsolidationError):
    """默认值文件内容非法"""

    info = CliErrors.DEFAULTS_FILE_INVALID

    def __init__(self, path: str, options: Iterable[str], reason: str):
        self.path = path
        super().__init__(options, reason, path=path)


class ResourceUnavailableError(AppError):
    """预先初始化的外部资源无法建立"""

    info = CliErrors.RESOURCE_UNAVAILABLE

    def __init__(self, option: str, target: str, reason: str):
        self.option = option
        self.target = target
        self.reason = reason
        super().__init__(option=option, target=target, reason=reason)
