"""Centralized error handling

All errors that reach a user-facing operation are turned into a single
banner message here. Server-supplied messages win over the operation's
fallback where the backend provided one.
"""

import logging
from typing import Optional

from .exceptions import (APIError, AuthError, PermissionDeniedError,
                         ReloadError, SessionExpiredError, StokvelError,
                         ValidationException)

logger = logging.getLogger(__name__)

DEFAULT_MESSAGE = "Something went wrong. Please try again."
LOGIN_FAILED_MESSAGE = "Login failed. Please check your credentials."


class ErrorHandler:
    """Maps exceptions to user-facing messages"""

    @classmethod
    def user_message(
        cls,
        error: Exception,
        fallback: Optional[str] = None,
        prefer_server_message: bool = False
    ) -> str:
        """Get banner text for an error and log it

        Args:
            error: The caught exception
            fallback: Operation specific message used for server/network errors
            prefer_server_message: Use the backend's message when it sent one

        Returns:
            str: Message to show the user
        """
        cls.log(error)

        if isinstance(error, (ValidationException, AuthError, SessionExpiredError,
                              PermissionDeniedError, ReloadError)):
            return error.message

        if isinstance(error, APIError):
            if prefer_server_message and error.server_message:
                return error.server_message
            return fallback or error.message

        if isinstance(error, StokvelError):
            return fallback or error.message

        return fallback or DEFAULT_MESSAGE

    @staticmethod
    def log(error: Exception) -> None:
        """Log error with its details at a level matching its category"""
        if isinstance(error, ValidationException):
            logger.info(f"Validation failed: {error.message} ({error.field})")
        elif isinstance(error, (AuthError, SessionExpiredError, PermissionDeniedError)):
            logger.warning(f"{type(error).__name__}: {error.message}")
        elif isinstance(error, StokvelError):
            logger.error(f"{type(error).__name__}: {error.message}", extra={"details": error.details})
        else:
            logger.error(f"Unexpected error: {error}", exc_info=error)
