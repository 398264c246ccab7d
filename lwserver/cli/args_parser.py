import sys
import argparse
from functools import wraps
from typing import Callable, Optional, Sequence

from lwserver.common.errors import ConversionError
from . import converters
from .defaults import ServerDefaults, DEFAULTS_FILE_OPTION
from .identity import IDENTITY_OPTIONS

PROG = "lwserver"

DESCRIPTION = (
    "LWM2M服务端启动配置。不带任何参数即可使用默认配置启动。\n"
    "CoAP默认端口可以通过 --defaults-file 指定的YAML文件调整。"
)


def _typed(converter: Callable, option: str) -> Callable:
    """包装转换器，使错误信息中带上参数名"""
    @wraps(converter)
    def convert(token: str):
        try:
            return converter(token)
        except ConversionError as e:
            raise e.for_option(option) from e
    return convert


def _add_general_arguments(parser: argparse.ArgumentParser, defaults: ServerDefaults) -> None:
    group = parser.add_argument_group("General")
    group.add_argument(
        "-h", "--help",
        action="help",
        help="显示帮助信息并退出"
    )
    group.add_argument(
        "-df", DEFAULTS_FILE_OPTION,
        dest="defaults_file",
        metavar="FILE",
        help="YAML格式的默认值文件(coap_port/coaps_port/web_port)"
    )
    group.add_argument(
        "-lh", "--coap-host",
        dest="local_address",
        metavar="HOST",
        help="服务端CoAP监听地址。默认: 任意本地地址"
    )
    group.add_argument(
        "-lp", "--coap-port",
        dest="local_port",
        metavar="PORT",
        type=_typed(converters.port, "-lp/--coap-port"),
        default=defaults.coap_port,
        help="服务端CoAP监听端口。默认: %(default)s"
    )
    group.add_argument(
        "-slh", "--coaps-host",
        dest="secure_local_address",
        metavar="HOST",
        help="服务端CoAP over DTLS监听地址。默认: 任意本地地址"
    )
    group.add_argument(
        "-slp", "--coaps-port",
        dest="secure_local_port",
        metavar="PORT",
        type=_typed(converters.port, "-slp/--coaps-port"),
        default=defaults.coaps_port,
        help="服务端CoAP over DTLS监听端口。默认: %(default)s"
    )
    group.add_argument(
        "-wh", "--web-host",
        dest="web_host",
        metavar="HOST",
        help="Web服务监听地址。默认: 任意本地地址"
    )
    group.add_argument(
        "-wp", "--web-port",
        dest="web_port",
        metavar="PORT",
        type=_typed(converters.port, "-wp/--web-port"),
        default=defaults.web_port,
        help="Web服务监听端口。默认: %(default)s"
    )
    group.add_argument(
        "-m", "--models-folder",
        dest="models_folder",
        metavar="DIR",
        help="存放OMA DDF(xml)格式对象模型的目录"
    )
    group.add_argument(
        "-r", "--redis",
        dest="redis",
        metavar="URL",
        type=_typed(converters.redis_endpoint, "-r/--redis"),
        help=("使用redis保存注册信息和安全信息，格式: redis://:password@hostname:port/db_number，"
              "例如 redis://localhost:6379。默认: 不使用redis")
    )
    group.add_argument(
        "-mdns", "--publish-DNS-SD-services",
        dest="mdns",
        action="store_true",
        help="通过DNS服务发现(DNS-SD)发布服务"
    )


def _add_dtls_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group(
        "DTLS Options",
        "服务端使用CoAP over DTLS时的行为配置"
    )
    group.add_argument(
        "-cid", "--connection-id",
        dest="cid",
        metavar="CID",
        type=_typed(converters.connection_id, "-cid/--connection-id"),
        default="on",
        help=("DTLS Connection ID的使用方式: 'on' 启用(等同于 -cid 6); 'off' 关闭; "
              "正数为生成CID的字节数; 0 表示接受CID但不为对端生成。默认: on")
    )
    group.add_argument(
        "-oc", "--support-deprecated-ciphers",
        dest="support_deprecated_ciphers",
        action="store_true",
        help="启用已废弃的旧加密套件"
    )


def _add_identity_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_argument_group(
        "Identity Options",
        "服务端身份凭据，RPK与X.509两种模式互斥"
    )
    for options in IDENTITY_OPTIONS.values():
        for opt in options:
            group.add_argument(*opt.flags, dest=opt.dest, metavar="FILE", help=opt.help)


def build_parser(defaults: Optional[ServerDefaults] = None) -> argparse.ArgumentParser:
    """构建命令行解析器，默认值由调用方显式传入"""
    defaults = defaults or ServerDefaults()
    parser = argparse.ArgumentParser(
        prog=PROG,
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    _add_general_arguments(parser, defaults)
    _add_dtls_arguments(parser)
    _add_identity_arguments(parser)
    return parser


def _pre_parse(argv: Sequence[str]) -> argparse.Namespace:
    """预解析: 只识别帮助和默认值文件"""
    pre = argparse.ArgumentParser(prog=PROG, add_help=False)
    pre.add_argument("-h", "--help", action="store_true")
    pre.add_argument("-df", DEFAULTS_FILE_OPTION, dest="defaults_file")
    known, _ = pre.parse_known_args(argv)
    return known


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    解析命令行参数

    -h/--help 优先于其他参数处理，直接打印帮助并以0退出
    """
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    pre = _pre_parse(argv)
    if pre.help:
        build_parser().print_help()
        raise SystemExit(0)

    defaults = ServerDefaults.from_file(pre.defaults_file) if pre.defaults_file else ServerDefaults()
    return build_parser(defaults).parse_args(argv)
