from typing import Any, Dict, List
from jsonschema import Draft7Validator, ValidationError, validators

from lwserver.common.logging import init_logger
from lwserver.common.errors import DefaultsFileError
from .schema import get_schema

logger = init_logger("lwserver/cli")


def _is_strict_integer(checker, instance) -> bool:
    # Draft 7 认为 5690.0 也是 integer，端口只接受真正的整数
    return isinstance(instance, int) and not isinstance(instance, bool)


StrictValidator = validators.extend(
    Draft7Validator,
    type_checker=Draft7Validator.TYPE_CHECKER.redefine("integer", _is_strict_integer),
)


def _error_keys(error: ValidationError) -> List[str]:
    """出错的配置键; 未知键错误的路径指向上一层，需要从实例中找出多余的键"""
    location = ".".join(str(p) for p in error.path)
    if error.validator == "additionalProperties" and isinstance(error.instance, dict):
        known = error.schema.get("properties", {})
        return [f"{location}.{key}" if location else str(key)
                for key in error.instance if key not in known]
    return [location or "<root>"]


class ConfigValidator:
    """
    配置验证器，使用JSON Schema校验外部配置文件
    """

    def __init__(self):
        self.schemas: Dict[str, Dict[str, Any]] = {}
        self.register_schema("defaults", get_schema("defaults"))

    def register_schema(self, name: str, schema: Dict[str, Any]) -> None:
        """
        注册验证模式

        Args:
            name: 模式名称
            schema: JSON Schema
        """
        StrictValidator.check_schema(schema)
        self.schemas[name] = schema

    def validate_config(self, config: Any, path: str, schema_name: str = "defaults") -> None:
        """
        验证配置，失败时抛出 DefaultsFileError

        Args:
            config: 要验证的配置
            path: 配置来源文件，用于错误信息
            schema_name: 使用的模式名称
        """
        if schema_name not in self.schemas:
            raise KeyError(f"未知的 Schema: {schema_name}")

        validator = StrictValidator(self.schemas[schema_name])
        errors = sorted(validator.iter_errors(config), key=lambda e: list(e.path))
        if not errors:
            return

        keys = []
        for error in errors:
            error_keys = _error_keys(error)
            logger.error(f"配置验证错误 {path} {', '.join(error_keys)}: {error.message}")
            keys.extend(error_keys)

        raise DefaultsFileError(path, keys, errors[0].message)
