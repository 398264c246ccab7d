from .cli import (
    CliErrors,
    ConversionError,
    InvalidPortError,
    InvalidCIDError,
    InvalidEndpointError,
    ConsolidationError,
    DefaultsFileError,
    ResourceUnavailableError,
)

__all__ = [
    'CliErrors',
    'ConversionError',
    'InvalidPortError',
    'InvalidCIDError',
    'InvalidEndpointError',
    'ConsolidationError',
    'DefaultsFileError',
    'ResourceUnavailableError',
]
