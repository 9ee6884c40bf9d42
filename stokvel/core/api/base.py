"""Base API functionality using pure functions"""
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

import requests
from requests.exceptions import RequestException, Timeout

from stokvel.core.error.exceptions import (APIError, NetworkError,
                                           SessionExpiredError)

from .config import StokvelAPIConfig, StokvelEndpoints

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_headers(
    api_config: StokvelAPIConfig,
    session_manager: Any,
    requires_auth: bool,
    action: str
) -> Dict[str, str]:
    """Get request headers with the bearer token when one is stored

    Raises:
        SessionExpiredError: Endpoint needs auth and no token is stored
    """
    headers = api_config.get_headers()
    token = session_manager.get_token() if session_manager is not None else None

    if token:
        headers["Authorization"] = f"Bearer {token}"
    elif requires_auth:
        logger.warning(f"No token available for authenticated request {action}")
        raise SessionExpiredError(action=action)

    return headers


def extract_server_message(response: requests.Response) -> Optional[str]:
    """Pull the backend's error text out of a failed response"""
    try:
        data = response.json()
    except ValueError:
        return None
    if isinstance(data, dict):
        message = data.get("error") or data.get("message")
        if isinstance(message, str) and message:
            return message
    return None


def process_api_response(response: requests.Response, action: str) -> Any:
    """Parse a successful response body"""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Failed to parse response JSON for {action}: {e}")
        raise APIError(
            "Invalid JSON response",
            status_code=response.status_code,
            action=action
        ) from e


def make_api_request(
    group: str,
    action: str,
    session_manager: Any = None,
    payload: Optional[Dict[str, Any]] = None,
    path_params: Optional[Dict[str, Any]] = None,
    api_config: Optional[StokvelAPIConfig] = None
) -> Any:
    """Make an HTTP request to the backend using endpoint groups

    A 401 on an authenticated endpoint clears the session through
    ``session_manager.on_unauthorized()`` before the error reaches the caller.
    Nothing is retried.

    Returns:
        Parsed JSON body, or None for empty responses

    Raises:
        SessionExpiredError: No token stored, or the backend rejected it
        APIError: Non-2xx response
        NetworkError: Connection failure or timeout
    """
    endpoint = StokvelEndpoints.get(group, action)
    api_config = api_config or StokvelAPIConfig.from_env()
    name = f"{group}.{action}"

    url = api_config.get_url(endpoint.format_path(**(path_params or {})))
    headers = get_headers(api_config, session_manager, endpoint.requires_auth, name)

    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Making API request {endpoint.method} {url}")

    try:
        response = requests.request(
            endpoint.method,
            url,
            headers=headers,
            json=payload,
            timeout=api_config.timeout
        )
    except Timeout as e:
        logger.error(f"Request {name} timed out after {api_config.timeout}s")
        raise NetworkError(
            f"Request timed out after {api_config.timeout} seconds",
            action=name
        ) from e
    except RequestException as e:
        logger.error(f"Request {name} failed: {str(e)}")
        raise NetworkError(f"Connection error: {str(e)}", action=name) from e

    logger.debug(f"API Response Status: {response.status_code}")

    if response.status_code == 401 and endpoint.requires_auth:
        logger.warning(f"Unauthorized response for {name}")
        if session_manager is not None:
            session_manager.on_unauthorized()
        raise SessionExpiredError(action=name)

    if not response.ok:
        server_message = extract_server_message(response)
        logger.info(f"Non-2xx response for {name}: {response.status_code} {server_message or ''}".rstrip())
        raise APIError(
            f"API request failed: {response.status_code}",
            status_code=response.status_code,
            server_message=server_message,
            action=name
        )

    return process_api_response(response, name)


def as_list(data: Any, action: str) -> List[Dict[str, Any]]:
    """Normalize a collection response to a list of records"""
    if data is None:
        return []
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        data = data["data"]
    if not isinstance(data, list):
        raise APIError(f"Unexpected response shape for {action}", action=action)
    return data


def parse_records(data: Any, parser: Callable[[Dict[str, Any]], T], action: str) -> List[T]:
    """Parse a collection response into typed records

    Raises:
        APIError: A record is missing required fields or is not an object
    """
    return [parse_record(item, parser, action) for item in as_list(data, action)]


def parse_record(data: Any, parser: Callable[[Dict[str, Any]], T], action: str) -> T:
    try:
        return parser(data)
    except (KeyError, TypeError, AttributeError) as e:
        logger.error(f"Malformed record in {action} response: {e!r}")
        raise APIError(f"Unexpected response shape for {action}", action=action) from e
