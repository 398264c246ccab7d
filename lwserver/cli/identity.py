from pathlib import Path
from argparse import Namespace
from dataclasses import dataclass, fields
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple, Union

from lwserver.common.logging import init_logger
from lwserver.common.errors import ConversionError, ConsolidationError
from lwserver.vars import IdentityMode
from .converters import existing_file, existing_path

logger = init_logger("lwserver/cli")


@dataclass(frozen=True)
class RawPublicKeyIdentity:
    """使用RPK(Raw Public Key)的服务端身份"""
    mode: ClassVar[IdentityMode] = IdentityMode.RPK

    public_key: Path
    private_key: Path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "public_key": str(self.public_key),
            "private_key": str(self.private_key),
        }


@dataclass(frozen=True)
class X509Identity:
    """使用X.509证书链的服务端身份"""
    mode: ClassVar[IdentityMode] = IdentityMode.X509

    certificate_chain: Path
    private_key: Path
    truststore: Optional[Path] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "certificate_chain": str(self.certificate_chain),
            "private_key": str(self.private_key),
            "truststore": str(self.truststore) if self.truststore else None,
        }


# 未选择任何身份时为None，服务端只能使用非证书类的安全模式
ServerIdentity = Union[RawPublicKeyIdentity, X509Identity, None]


@dataclass(frozen=True)
class IdentityOption:
    """身份模式下的单个命令行参数"""
    dest: str
    flags: Tuple[str, ...]
    help: str
    field: str
    required: bool = True
    converter: Callable[[str], Path] = existing_file

    @property
    def name(self) -> str:
        return "/".join(self.flags)


IDENTITY_OPTIONS: Dict[IdentityMode, Tuple[IdentityOption, ...]] = {
    IdentityMode.RPK: (
        IdentityOption(
            dest="rpk_public_key",
            flags=("-pubk", "--server-public-key"),
            help="服务端公钥文件(SubjectPublicKeyInfo, DER/PEM)，用于RPK模式",
            field="public_key",
        ),
        IdentityOption(
            dest="rpk_private_key",
            flags=("-prik", "--server-private-key"),
            help="服务端私钥文件(PKCS#8, DER/PEM)，用于RPK模式",
            field="private_key",
        ),
    ),
    IdentityMode.X509: (
        IdentityOption(
            dest="x509_certificate",
            flags=("-xcert", "--server-certificate"),
            help="服务端X.509证书链文件，用于X.509模式",
            field="certificate_chain",
        ),
        IdentityOption(
            dest="x509_private_key",
            flags=("-xprik", "--x509-private-key"),
            help="服务端证书对应的私钥文件(PKCS#8, DER/PEM)，用于X.509模式",
            field="private_key",
        ),
        IdentityOption(
            dest="x509_truststore",
            flags=("-truststore", "--truststore"),
            help="受信任证书所在的文件或目录，用于校验客户端证书",
            field="truststore",
            required=False,
            converter=existing_path,
        ),
    ),
}

IDENTITY_TYPES = {
    IdentityMode.RPK: RawPublicKeyIdentity,
    IdentityMode.X509: X509Identity,
}


@dataclass(frozen=True)
class IdentitySection:
    """
    服务端身份配置段

    保存各身份模式下的原始参数值，解析阶段不检查互斥，
    由 build() 在整合阶段统一校验并生成 ServerIdentity
    """
    rpk_public_key: Optional[str] = None
    rpk_private_key: Optional[str] = None
    x509_certificate: Optional[str] = None
    x509_private_key: Optional[str] = None
    x509_truststore: Optional[str] = None

    @classmethod
    def from_namespace(cls, args: Namespace) -> "IdentitySection":
        return cls(**{f.name: getattr(args, f.name, None) for f in fields(cls)})

    def given_options(self, mode: IdentityMode) -> List[IdentityOption]:
        """返回某个身份模式下用户给出的参数"""
        return [opt for opt in IDENTITY_OPTIONS[mode] if getattr(self, opt.dest) is not None]

    def selected_modes(self) -> List[IdentityMode]:
        return [mode for mode in IDENTITY_OPTIONS if self.given_options(mode)]

    def build(self) -> ServerIdentity:
        """校验身份参数组合，生成最终的服务端身份"""
        modes = self.selected_modes()
        if len(modes) > 1:
            flags = [opt.flags[-1] for mode in modes for opt in self.given_options(mode)]
            raise ConsolidationError(
                flags,
                f"身份模式互斥，只能选择一种 (当前选择了: {', '.join(m.value for m in modes)})"
            )

        if not modes:
            logger.debug("未配置服务端身份")
            return None

        mode = modes[0]
        values = {}
        for opt in IDENTITY_OPTIONS[mode]:
            token = getattr(self, opt.dest)
            if token is None:
                if opt.required:
                    given = [o.flags[-1] for o in self.given_options(mode)]
                    raise ConsolidationError(
                        given + [opt.flags[-1]],
                        f"使用 {mode.value} 身份时必须指定 {opt.name}"
                    )
                continue
            try:
                values[opt.field] = opt.converter(token)
            except ConversionError as e:
                raise e.for_option(opt.name) from e

        identity = IDENTITY_TYPES[mode](**values)
        logger.debug(f"服务端身份: {identity.to_dict()}")
        return identity
