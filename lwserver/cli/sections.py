from pathlib import Path
from argparse import Namespace
from dataclasses import dataclass
from typing import Any, Dict, Optional

from lwserver.vars import DEFAULT_COAP_PORT, DEFAULT_COAP_SECURE_PORT, DEFAULT_WEB_PORT, DEFAULT_CID_LENGTH
from .converters import RedisEndpoint


@dataclass(frozen=True)
class GeneralSection:
    """通用配置段: 监听地址、Web端口、模型目录和存储"""
    local_address: Optional[str] = None
    local_port: int = DEFAULT_COAP_PORT
    secure_local_address: Optional[str] = None
    secure_local_port: int = DEFAULT_COAP_SECURE_PORT
    web_host: Optional[str] = None
    web_port: int = DEFAULT_WEB_PORT
    models_folder: Optional[Path] = None
    redis: Optional[RedisEndpoint] = None
    mdns: bool = False

    @classmethod
    def from_namespace(cls, args: Namespace) -> "GeneralSection":
        return cls(
            local_address=args.local_address,
            local_port=args.local_port,
            secure_local_address=args.secure_local_address,
            secure_local_port=args.secure_local_port,
            web_host=args.web_host,
            web_port=args.web_port,
            models_folder=Path(args.models_folder) if args.models_folder else None,
            redis=args.redis,
            mdns=args.mdns,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "local_address": self.local_address,
            "local_port": self.local_port,
            "secure_local_address": self.secure_local_address,
            "secure_local_port": self.secure_local_port,
            "web_host": self.web_host,
            "web_port": self.web_port,
            "models_folder": str(self.models_folder) if self.models_folder else None,
            "redis": self.redis.to_dict() if self.redis else None,
            "mdns": self.mdns,
        }


@dataclass(frozen=True)
class DTLSSection:
    """DTLS配置段"""
    # None 表示不使用CID; 0 表示接受但不生成; N>0 表示生成N字节的CID
    cid: Optional[int] = DEFAULT_CID_LENGTH
    support_deprecated_ciphers: bool = False

    @classmethod
    def from_namespace(cls, args: Namespace) -> "DTLSSection":
        return cls(
            cid=args.cid,
            support_deprecated_ciphers=args.support_deprecated_ciphers,
        )

    @property
    def cid_enabled(self) -> bool:
        return self.cid is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cid": self.cid,
            "support_deprecated_ciphers": self.support_deprecated_ciphers,
        }
