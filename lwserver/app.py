import sys
from typing import Callable, Optional, Sequence

from lwserver.common.logging import init_logger
from lwserver.common.errors import LogErrorHandler
from lwserver.cli import ServerCLI, ServerConfig, ServerResources
from lwserver.cli.args_parser import PROG

logger = init_logger("lwserver/app")

# 服务启动方: 接收只读配置和已建立的资源
Starter = Callable[[ServerConfig, ServerResources], None]


def main(argv: Optional[Sequence[str]] = None, starter: Optional[Starter] = None) -> int:
    error_handler = LogErrorHandler(logger=logger)

    try:
        cli = ServerCLI.from_args(argv)
        config = cli.run()
        resources = ServerResources.open(config)
    except Exception as e:
        # 非AppError的启动异常归为 SYSTEM/UNKNOWN，同样输出可读信息后退出
        app_error = error_handler.handle(e)
        print(f"{PROG}: error: {app_error.message}", file=sys.stderr)
        return app_error.exit_code

    with resources:
        logger.info(f"配置校验通过: {config.to_dict()}")
        if starter is not None:
            starter(config, resources)

    return 0


if __name__ == "__main__":
    sys.exit(main())
