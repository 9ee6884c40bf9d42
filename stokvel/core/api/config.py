"""Stokvel API configuration using environment variables"""
from dataclasses import dataclass, field
from typing import Dict, NamedTuple

from stokvel.config import settings
from stokvel.core.error.exceptions import ConfigurationException


@dataclass
class StokvelAPIConfig:
    """Configuration for backend API access"""
    base_url: str
    timeout: float = 15.0
    default_headers: Dict[str, str] = field(default_factory=lambda: {
        "Content-Type": "application/json",
        "Accept": "application/json",
    })

    def __post_init__(self):
        if not self.base_url:
            raise ConfigurationException(
                "STOKVEL_API_URL environment variable is not set",
                "missing"
            )
        if self.timeout <= 0:
            raise ConfigurationException(
                "STOKVEL_API_TIMEOUT must be positive",
                "validation"
            )

    @classmethod
    def from_env(cls) -> "StokvelAPIConfig":
        """Create configuration from environment variables"""
        return cls(base_url=settings.API_URL, timeout=settings.API_TIMEOUT)

    def get_url(self, path: str) -> str:
        """Get full URL for an endpoint path"""
        if not path:
            raise ConfigurationException(
                "Endpoint is required",
                "validation"
            )
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def get_headers(self) -> Dict[str, str]:
        """Get default headers"""
        return self.default_headers.copy()


class Endpoint(NamedTuple):
    method: str
    path: str
    requires_auth: bool = True

    def format_path(self, **params) -> str:
        try:
            return self.path.format(**params)
        except KeyError as e:
            raise ConfigurationException(
                f"Missing path parameter {e} for {self.path}",
                "validation"
            )


class StokvelEndpoints:
    """Backend endpoint definitions"""

    ENDPOINTS = {
        'auth': {
            'login': Endpoint('POST', 'auth/login', requires_auth=False),
        },
        'members': {
            'list': Endpoint('GET', 'members'),
            'get': Endpoint('GET', 'members/{member_id}'),
            'create': Endpoint('POST', 'members'),
            'update': Endpoint('PUT', 'members/{member_id}'),
            'delete': Endpoint('DELETE', 'members/{member_id}'),
        },
        'contributions': {
            'list': Endpoint('GET', 'contributions'),
            'create': Endpoint('POST', 'contributions'),
            'update_status': Endpoint('PUT', 'contributions/{contribution_id}'),
        },
        'announcements': {
            'list': Endpoint('GET', 'announcements'),
            'create': Endpoint('POST', 'announcements'),
            'delete': Endpoint('DELETE', 'announcements/{announcement_id}'),
        },
        'stats': {
            'member': Endpoint('GET', 'stats/{member_id}'),
        },
    }

    @classmethod
    def get(cls, group: str, action: str) -> Endpoint:
        """Get endpoint definition"""
        if not group or not action:
            raise ConfigurationException(
                "Group and action are required",
                "validation"
            )

        if group not in cls.ENDPOINTS:
            raise ConfigurationException(
                f"Invalid endpoint group: {group}",
                "validation"
            )
        if action not in cls.ENDPOINTS[group]:
            raise ConfigurationException(
                f"Invalid action '{action}' for group '{group}'",
                "validation"
            )

        return cls.ENDPOINTS[group][action]

    @classmethod
    def requires_auth(cls, group: str, action: str) -> bool:
        """Check if endpoint requires authentication"""
        return cls.get(group, action).requires_auth
