from pathlib import Path
from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, Union

import yaml

from lwserver.common.logging import init_logger
from lwserver.common.errors import ConversionError, DefaultsFileError
from lwserver.vars import DEFAULT_COAP_PORT, DEFAULT_COAP_SECURE_PORT, DEFAULT_WEB_PORT
from .validator import ConfigValidator

logger = init_logger("lwserver/cli")

DEFAULTS_FILE_OPTION = "--defaults-file"


@dataclass(frozen=True)
class ServerDefaults:
    """
    各配置段的默认值

    启动时显式构造并传入参数解析器，配置段自身不做任何全局默认值查找
    """
    coap_port: int = DEFAULT_COAP_PORT
    coaps_port: int = DEFAULT_COAP_SECURE_PORT
    web_port: int = DEFAULT_WEB_PORT

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ServerDefaults":
        """从YAML文件加载默认值，未出现的键保持内置默认值"""
        path = Path(path)
        if not path.is_file():
            raise ConversionError(str(path), "默认值文件不存在", DEFAULTS_FILE_OPTION)

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (yaml.YAMLError, UnicodeDecodeError) as e:
            raise DefaultsFileError(str(path), [DEFAULTS_FILE_OPTION], f"YAML解析失败: {e}") from e
        except OSError as e:
            raise ConversionError(str(path), f"默认值文件无法读取: {e.strerror or e}", DEFAULTS_FILE_OPTION) from e

        if data is None:
            data = {}
        ConfigValidator().validate_config(data, str(path))

        defaults = replace(cls(), **data)
        logger.debug(f"从 {path} 加载默认值: {defaults.to_dict()}")
        return defaults
