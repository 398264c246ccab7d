from .converters import (
    port,
    connection_id,
    redis_endpoint,
    existing_directory,
    existing_file,
    existing_path,
    RedisEndpoint,
)
from .defaults import ServerDefaults
from .sections import GeneralSection, DTLSSection
from .identity import (
    IdentitySection,
    RawPublicKeyIdentity,
    X509Identity,
    ServerIdentity,
)
from .args_parser import build_parser, parse_args
from .server_cli import ServerCLI, ServerConfig
from .resources import ServerResources, open_redis_pool

__all__ = [
    'port',
    'connection_id',
    'redis_endpoint',
    'existing_directory',
    'existing_file',
    'existing_path',
    'RedisEndpoint',

    'ServerDefaults',
    'GeneralSection',
    'DTLSSection',
    'IdentitySection',
    'RawPublicKeyIdentity',
    'X509Identity',
    'ServerIdentity',

    'build_parser',
    'parse_args',
    'ServerCLI',
    'ServerConfig',
    'ServerResources',
    'open_redis_pool',
]
