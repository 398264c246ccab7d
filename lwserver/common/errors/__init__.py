from .types import ErrorInfo, ErrorContext, ErrorCategory
from .base import AppError
from .registry import error_group, ErrorDef, ErrorRegistry
from .errors import Errors
from .error_handler import BaseErrorHandler, LogErrorHandler
from .modules import (
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
    'error_group',
    'ErrorInfo',
    'ErrorContext',
    'ErrorCategory',
    'AppError',
    'ErrorDef',
    'ErrorRegistry',
    'Errors',

    'BaseErrorHandler',
    'LogErrorHandler',

    'CliErrors',
    'ConversionError',
    'InvalidPortError',
    'InvalidCIDError',
    'InvalidEndpointError',
    'ConsolidationError',
    'DefaultsFileError',
    'ResourceUnavailableError',
]
