from typing import Dict, Optional

from .types import ErrorCategory, ErrorInfo


class ErrorDef:
    """错误定义帮助类，在错误组中声明，注册后替换为ErrorInfo"""
    def __init__(self,
                 code: str,
                 message: str,
                 exit_code: int = 1,
                 category: ErrorCategory = ErrorCategory.SYSTEM):
        self.code = code
        self.message = message
        self.exit_code = exit_code
        self.category = category

    def register(self, module: str) -> ErrorInfo:
        return ErrorRegistry().register(
            module, self.code, self.message,
            self.exit_code, self.category
        )


def error_group(module_name: str):
    """错误组装饰器，将类变量中的ErrorDef注册为ErrorInfo"""
    def decorator(cls):
        cls._error_module = module_name.upper()
        for name, attr in list(cls.__dict__.items()):
            if isinstance(attr, ErrorDef):
                setattr(cls, name, attr.register(cls._error_module))
        return cls
    return decorator


class ErrorRegistry:
    """错误注册表单例"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(ErrorRegistry, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._errors: Dict[str, ErrorInfo] = {}
        # 注册系统默认错误
        self.register("SYSTEM", "UNKNOWN", "系统未知错误: {exception_msg}", 1)

    def register(self,
                 module: str,
                 code: str,
                 message: str,
                 exit_code: int = 1,
                 category: ErrorCategory = ErrorCategory.SYSTEM) -> ErrorInfo:
        """注册新错误"""
        full_code = f"{module.upper()}/{code}"

        if full_code in self._errors:
            raise ValueError(f"错误码 {full_code} 已注册")

        info = ErrorInfo(
            code=full_code,
            message=message,
            exit_code=exit_code,
            category=category
        )

        self._errors[full_code] = info
        return info

    def get(self, code: str) -> Optional[ErrorInfo]:
        """获取错误信息"""
        if code in self._errors:
            return self._errors[code]

        # 尝试按短码匹配
        if "/" not in code:
            for full_code in self._errors:
                if full_code.endswith("/" + code):
                    return self._errors[full_code]

        return None

    def get_or_unknown(self, code: str) -> ErrorInfo:
        """获取错误信息或返回未知错误"""
        return self.get(code) or self._errors["SYSTEM/UNKNOWN"]
