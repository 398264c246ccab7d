from typing import Optional

import redis

from lwserver.common.logging import init_logger
from lwserver.common.errors import ResourceUnavailableError
from lwserver.vars import DEFAULT_REDIS_TIMEOUT
from .converters import RedisEndpoint
from .server_cli import ServerConfig

logger = init_logger("lwserver/resources")

REDIS_OPTION = "-r/--redis"


def open_redis_pool(endpoint: RedisEndpoint,
                    timeout: float = DEFAULT_REDIS_TIMEOUT) -> redis.ConnectionPool:
    """
    根据端点描述建立redis连接池，并立即ping一次以便快速失败

    Args:
        endpoint: 解析后的redis端点
        timeout: 建立连接和读写的超时秒数
    """
    pool = redis.ConnectionPool(
        socket_connect_timeout=timeout,
        socket_timeout=timeout,
        **endpoint.connection_kwargs(),
    )
    try:
        redis.Redis(connection_pool=pool).ping()
    except (redis.exceptions.ConnectionError,
            redis.exceptions.TimeoutError,
            redis.exceptions.ResponseError) as e:
        # ResponseError: 例如库编号越界
        pool.disconnect()
        raise ResourceUnavailableError(REDIS_OPTION, endpoint.redacted(), str(e)) from e

    logger.info(f"已连接redis: {endpoint.redacted()}")
    return pool


class ServerResources:
    """
    配置整合成功后建立的外部资源

    资源归本对象所有，服务启动方只借用，进程退出前由 close() 统一释放
    """

    def __init__(self, redis_pool: Optional[redis.ConnectionPool] = None):
        self.redis_pool = redis_pool

    @classmethod
    def open(cls, config: ServerConfig, timeout: float = DEFAULT_REDIS_TIMEOUT) -> "ServerResources":
        endpoint = config.general.redis
        if endpoint is None:
            return cls()
        return cls(redis_pool=open_redis_pool(endpoint, timeout))

    def close(self) -> None:
        if self.redis_pool is not None:
            self.redis_pool.disconnect()
            self.redis_pool = None
            logger.debug("redis连接池已关闭")

    def __enter__(self) -> "ServerResources":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
