import time
import uuid
from enum import Enum
from typing import Any, Dict, Optional
from dataclasses import dataclass, field


class ErrorCategory(str, Enum):
    """错误类别枚举，用于对启动错误进行分类"""
    CONVERSION = "conversion"        # 单个参数取值非法
    CONSOLIDATION = "consolidation"  # 多个参数组合非法
    RESOURCE = "resource"            # 外部资源不可用
    SYSTEM = "system"                # 系统内部错误


@dataclass(frozen=True)
class ErrorInfo:
    """错误基本信息，不可变"""
    code: str
    message: str
    exit_code: int = 1
    category: ErrorCategory = ErrorCategory.SYSTEM

    def __str__(self):
        return f"{self.code}:{self.message}"


@dataclass
class ErrorContext:
    """错误上下文信息"""
    timestamp: float = field(default_factory=time.time)
    trace_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    metadata: Dict[str, Any] = field(default_factory=dict)

    cause: Optional[BaseException] = None  # 原始异常，支持错误链

    def with_data(self, **kwargs) -> 'ErrorContext':
        """添加元数据，支持链式调用"""
        for key, value in kwargs.items():
            if hasattr(self, key) and key not in ('metadata', 'cause'):
                setattr(self, key, value)
            elif key == 'cause':
                self.cause = value
            else:
                self.metadata[key] = value
        return self

    def merge(self, other: Optional['ErrorContext'] = None) -> 'ErrorContext':
        """合并另一个上下文"""
        if not other:
            return self

        # 创建新实例避免修改原实例
        result = ErrorContext(
            trace_id=other.trace_id,
            timestamp=other.timestamp,
            cause=other.cause or self.cause
        )

        result.metadata = self.metadata.copy()
        result.metadata.update(other.metadata)

        return result
