"""Authentication API operations using pure functions"""
import logging
from typing import Any, Dict, Optional

from stokvel.core.error.exceptions import APIError, AuthError
from stokvel.core.error.handler import LOGIN_FAILED_MESSAGE

from .base import make_api_request
from .config import StokvelAPIConfig

logger = logging.getLogger(__name__)

# Statuses that mean the credentials were rejected rather than the server failing
REJECTED_STATUSES = {400, 401, 403, 404}


def login(email: str, password: str, api_config: Optional[StokvelAPIConfig] = None) -> Dict[str, Any]:
    """Sends a login request to the backend

    Returns:
        Dict with "token" and "user"

    Raises:
        AuthError: Credentials rejected, carrying the server's message if any
        NetworkError: Backend unreachable
    """
    try:
        return make_api_request(
            'auth', 'login',
            payload={"email": email, "password": password},
            api_config=api_config
        ) or {}
    except APIError as e:
        if e.status_code in REJECTED_STATUSES:
            logger.info(f"Login rejected: {e.status_code}")
            raise AuthError(e.server_message or LOGIN_FAILED_MESSAGE) from e
        raise
