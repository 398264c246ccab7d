import ipaddress
from argparse import Namespace
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from lwserver.common.logging import init_logger
from lwserver.common.errors import ConversionError, ConsolidationError
from lwserver.vars import CLIState
from .args_parser import parse_args
from .converters import existing_directory
from .identity import IdentitySection, ServerIdentity
from .sections import GeneralSection, DTLSSection

logger = init_logger("lwserver/cli")


@dataclass(frozen=True)
class ServerConfig:
    """整合校验完成后的只读服务端配置，交给服务启动方使用"""
    general: GeneralSection
    dtls: DTLSSection
    identity: ServerIdentity = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "general": self.general.to_dict(),
            "dtls": self.dtls.to_dict(),
            "identity": self.identity.to_dict() if self.identity else None,
        }


def _normalize_address(address: str) -> Union[str, ipaddress.IPv4Address, ipaddress.IPv6Address]:
    # 主机名不做DNS解析，只比较字面值
    try:
        return ipaddress.ip_address(address)
    except ValueError:
        return address.lower()


def _addresses_overlap(a: Optional[str], b: Optional[str]) -> bool:
    # None 以及通配地址表示监听所有本地地址
    left = None if a is None else _normalize_address(a)
    right = None if b is None else _normalize_address(b)
    for address in (left, right):
        if address is None or getattr(address, "is_unspecified", False):
            return True
    return left == right


class ServerCLI:
    """
    命令行配置根对象

    持有各配置段，run() 执行跨字段整合校验:
        UNVALIDATED --run()--> VALIDATED
    校验失败时直接抛出错误，状态保持 UNVALIDATED，不会产生 ServerConfig
    """

    def __init__(self,
                 general: Optional[GeneralSection] = None,
                 dtls: Optional[DTLSSection] = None,
                 identity: Optional[IdentitySection] = None):
        self.general = general or GeneralSection()
        self.dtls = dtls or DTLSSection()
        self.identity = identity or IdentitySection()
        self.state = CLIState.UNVALIDATED
        self._config: Optional[ServerConfig] = None

    @classmethod
    def from_namespace(cls, args: Namespace) -> "ServerCLI":
        return cls(
            general=GeneralSection.from_namespace(args),
            dtls=DTLSSection.from_namespace(args),
            identity=IdentitySection.from_namespace(args),
        )

    @classmethod
    def from_args(cls, argv: Optional[Sequence[str]] = None) -> "ServerCLI":
        """解析命令行参数并构建各配置段"""
        return cls.from_namespace(parse_args(argv))

    @property
    def config(self) -> ServerConfig:
        if self._config is None:
            raise RuntimeError("配置尚未整合，请先调用 run()")
        return self._config

    def run(self) -> ServerConfig:
        """执行跨字段整合校验，成功后返回只读配置"""
        if self.state is CLIState.VALIDATED:
            return self.config

        identity = self.identity.build()
        self._check_models_folder()
        self._check_port_conflicts()
        self._warn_unused_secure_options(identity)

        self._config = ServerConfig(general=self.general, dtls=self.dtls, identity=identity)
        self.state = CLIState.VALIDATED
        logger.debug(f"配置整合完成: {self._config.to_dict()}")
        return self._config

    def _check_models_folder(self) -> None:
        folder = self.general.models_folder
        if folder is None:
            return
        try:
            existing_directory(str(folder))
        except ConversionError as e:
            raise e.for_option("-m/--models-folder") from e

    def _check_port_conflicts(self) -> None:
        general = self.general
        # 端口0由系统分配，不会冲突
        if general.local_port == 0 or general.local_port != general.secure_local_port:
            return
        if _addresses_overlap(general.local_address, general.secure_local_address):
            raise ConsolidationError(
                ["--coap-port", "--coaps-port"],
                f"CoAP与CoAP over DTLS不能在相同地址上使用同一端口 {general.local_port}"
            )

    def _warn_unused_secure_options(self, identity: ServerIdentity) -> None:
        if identity is not None:
            return
        if self.dtls.support_deprecated_ciphers:
            logger.warning("未配置服务端身份，--support-deprecated-ciphers 仅对PSK生效")
        if self.general.secure_local_address is not None:
            logger.warning("未配置服务端身份，--coaps-host 仅对PSK生效")
