from enum import StrEnum


DEFAULT_COAP_PORT = 5683
DEFAULT_COAP_SECURE_PORT = 5684
DEFAULT_WEB_PORT = 8080

MIN_PORT = 0
MAX_PORT = 65535

DEFAULT_CID_LENGTH = 6  # 'on' 等价于 -cid 6

DEFAULT_REDIS_PORT = 6379
DEFAULT_REDIS_DB = 0
DEFAULT_REDIS_TIMEOUT = 5.0  # 建立连接的超时秒数，启动时不允许无限等待


class IdentityMode(StrEnum):
    """服务端身份凭据模式"""
    RPK = "rpk"    # Raw Public Key
    X509 = "x509"  # X.509证书


class CLIState(StrEnum):
    """命令行配置的生命周期状态"""
    UNVALIDATED = "UNVALIDATED"  # 已解析，未做跨字段校验
    VALIDATED = "VALIDATED"      # 已整合，只读
