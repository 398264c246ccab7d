from typing import Dict, Any

from lwserver.vars import MIN_PORT, MAX_PORT

_PORT = {"type": "integer", "minimum": MIN_PORT, "maximum": MAX_PORT}

# 默认值文件模式
DEFAULTS_SCHEMA = {
    "type": "object",
    "properties": {
        "coap_port": _PORT,
        "coaps_port": _PORT,
        "web_port": _PORT,
    },
    "additionalProperties": False,
}


def get_schema(schema_name: str) -> Dict[str, Any]:
    """获取指定名称的配置模式"""
    schemas = {
        "defaults": DEFAULTS_SCHEMA,
    }
    return schemas.get(schema_name, {})
