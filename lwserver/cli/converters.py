"""
参数值转换器

每个转换器都是纯函数: 接收命令行上的原始字符串，返回校验后的领域值，
非法时抛出对应的 ConversionError 子类。转换器不持有状态，也不建立任何连接。
抛出的错误不带参数名，由参数解析层补充。
"""
import re
from pathlib import Path
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, quote

import redis
from redis.connection import parse_url

from lwserver.common.errors import (
    ConversionError,
    InvalidPortError,
    InvalidCIDError,
    InvalidEndpointError,
)
from lwserver.vars import (
    MIN_PORT,
    MAX_PORT,
    DEFAULT_CID_LENGTH,
    DEFAULT_REDIS_PORT,
    DEFAULT_REDIS_DB,
)

_DECIMAL = re.compile(r"[0-9]+")
_SIGNED_DECIMAL = re.compile(r"[+-]?[0-9]+")

REDIS_SCHEMES = ("redis", "rediss")


def port(token: str) -> int:
    """将字符串转换为传输层端口号(0-65535)"""
    if not _DECIMAL.fullmatch(token):
        raise InvalidPortError(token)
    value = int(token)
    if not MIN_PORT <= value <= MAX_PORT:
        raise InvalidPortError(token)
    return value


def connection_id(token: str) -> Optional[int]:
    """
    将字符串转换为DTLS Connection ID策略

    - "off": 返回None，不使用CID
    - "on": 返回默认长度 DEFAULT_CID_LENGTH
    - 整数: 负数视为关闭(None); 0 表示接受对端CID但自身不生成;
      正数 N 表示接受CID并生成 N 字节的CID
    """
    if token == "off":
        return None
    if token == "on":
        return DEFAULT_CID_LENGTH
    if not _SIGNED_DECIMAL.fullmatch(token):
        raise InvalidCIDError(token)
    value = int(token)
    return None if value < 0 else value


@dataclass(frozen=True)
class RedisEndpoint:
    """redis连接端点描述，仅描述，不持有连接"""
    host: str
    port: int = DEFAULT_REDIS_PORT
    db: int = DEFAULT_REDIS_DB
    password: Optional[str] = None
    username: Optional[str] = None
    ssl: bool = False

    @property
    def scheme(self) -> str:
        return "rediss" if self.ssl else "redis"

    def connection_kwargs(self) -> Dict[str, Any]:
        """redis.ConnectionPool 的构造参数，凭据保持原样不经URL往返"""
        return {
            "host": self.host,
            "port": self.port,
            "db": self.db,
            "username": self.username,
            "password": self.password,
            "connection_class": redis.SSLConnection if self.ssl else redis.Connection,
        }

    def redacted(self) -> str:
        """用于日志输出的URL，隐藏密码"""
        host = f"[{self.host}]" if ":" in self.host else self.host
        user = quote(self.username, safe="") if self.username else ""
        credentials = ""
        if self.password is not None:
            credentials = f"{user}:***@"
        elif user:
            credentials = f"{user}@"
        return f"{self.scheme}://{credentials}{host}:{self.port}/{self.db}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "url": self.redacted(),
            "host": self.host,
            "port": self.port,
            "db": self.db,
            "ssl": self.ssl,
        }


def redis_endpoint(token: str) -> RedisEndpoint:
    """
    解析 redis://[[user]:password@]host[:port][/db] 格式的URI

    字段提取交给 redis.connection.parse_url，这里只补充它放过的情况:
    unix套接字、缺少主机、查询参数以及非数字的库编号。
    只做解析，不建立连接；连接在配置整合成功后由 resources 模块建立
    """
    scheme = token.partition("://")[0]
    if scheme not in REDIS_SCHEMES:
        raise InvalidEndpointError(token, f"不支持的协议 '{scheme}'，仅支持 {'/'.join(REDIS_SCHEMES)}")

    try:
        parts = urlsplit(token)
        kwargs = parse_url(token)
    except ValueError as e:
        raise InvalidEndpointError(token, f"URI格式错误: {e}") from e

    if not kwargs.get("host"):
        raise InvalidEndpointError(token, "缺少主机名")
    if parts.query or parts.fragment:
        raise InvalidEndpointError(token, "不支持查询参数或片段")

    # parse_url 会静默忽略无法解析的库编号，也会把 /1/2 拼成 12
    db_path = parts.path.strip("/")
    if db_path and not _DECIMAL.fullmatch(db_path):
        raise InvalidEndpointError(token, f"数据库编号 '{db_path}' 不是非负整数")

    return RedisEndpoint(
        host=kwargs["host"],
        port=kwargs.get("port", DEFAULT_REDIS_PORT),
        db=kwargs.get("db", DEFAULT_REDIS_DB),
        password=kwargs.get("password"),
        username=kwargs.get("username"),
        ssl=scheme == "rediss",
    )


def existing_directory(token: str) -> Path:
    path = Path(token).expanduser()
    if not path.is_dir():
        raise ConversionError(token, "目录不存在")
    return path


def existing_file(token: str) -> Path:
    path = Path(token).expanduser()
    if not path.is_file():
        raise ConversionError(token, "文件不存在")
    return path


def existing_path(token: str) -> Path:
    """文件或目录均可，例如信任库既可以是单个证书也可以是证书目录"""
    path = Path(token).expanduser()
    if not path.exists():
        raise ConversionError(token, "路径不存在")
    return path
