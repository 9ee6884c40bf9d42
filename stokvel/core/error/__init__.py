from .exceptions import (APIError, AuthError, ConfigurationException,
                         NetworkError, PermissionDeniedError, ReloadError,
                         SessionExpiredError, StokvelError, StorageError,
                         ValidationException)
from .handler import ErrorHandler

__all__ = [
    'StokvelError',
    'AuthError',
    'SessionExpiredError',
    'ValidationException',
    'APIError',
    'NetworkError',
    'ReloadError',
    'PermissionDeniedError',
    'ConfigurationException',
    'StorageError',
    'ErrorHandler',
]
