"""Core exceptions with clear error boundaries

This module defines the exceptions used throughout the client.
Each exception maps to one user-visible failure category:

- AuthError: bad credentials, shown inline on login
- SessionExpiredError: rejected or missing token, forces global logout
- ValidationException: missing or invalid input caught before any request
- APIError: network or server failure, shown as a dismissible banner
"""

from typing import Dict, Optional


class StokvelError(Exception):
    """Base exception with error details"""
    def __init__(self, message: str, details: Optional[Dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AuthError(StokvelError):
    """Login rejected by the backend"""
    pass


class SessionExpiredError(StokvelError):
    """Token missing, expired or rejected"""
    def __init__(self, message: str = "Session expired. Please log in again.", action: Optional[str] = None):
        super().__init__(message, {"action": action} if action else None)


class ValidationException(StokvelError):
    """Input validation errors"""
    def __init__(self, message: str, field: str, value: Optional[str] = None):
        self.field = field
        super().__init__(message, {"field": field, "value": value})


class APIError(StokvelError):
    """Backend or transport failure"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        server_message: Optional[str] = None,
        action: Optional[str] = None
    ):
        self.status_code = status_code
        self.server_message = server_message
        details = {
            "status_code": status_code,
            "server_message": server_message,
            "action": action
        }
        super().__init__(message, details)


class NetworkError(APIError):
    """Connection failures and timeouts"""
    pass


class ReloadError(APIError):
    """A dashboard reload was aborted"""
    pass


class ConfigurationException(StokvelError):
    """Client configuration errors"""
    def __init__(self, message: str, subtype: Optional[str] = None):
        self.subtype = subtype
        super().__init__(message, {"subtype": subtype})


class StorageError(StokvelError):
    """Durable session storage failures"""
    def __init__(self, message: str, cause: Optional[Exception] = None):
        self.cause = cause
        super().__init__(message)


class PermissionDeniedError(StokvelError):
    """Operation reserved for administrators"""
    def __init__(self, message: str = "Only administrators can do that.", action: Optional[str] = None):
        super().__init__(message, {"action": action} if action else None)
