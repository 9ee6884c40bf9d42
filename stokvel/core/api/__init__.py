"""Stokvel API Package

One function per backend operation. Every call attaches the stored bearer
token and hands 401 responses to the session manager.
"""

from .announcements import (create_announcement, delete_announcement,
                            list_announcements)
from .auth import login
from .base import make_api_request
from .client import create_api_service
from .config import Endpoint, StokvelAPIConfig, StokvelEndpoints
from .contributions import (create_contribution, list_contributions,
                            update_contribution_status)
from .members import (create_member, delete_member, get_member, list_members,
                      update_member)
from .stats import get_member_stats

__all__ = [
    # Auth functions
    'login',

    # Base functions
    'make_api_request',
    'create_api_service',

    # Member functions
    'list_members',
    'get_member',
    'create_member',
    'update_member',
    'delete_member',

    # Contribution functions
    'list_contributions',
    'create_contribution',
    'update_contribution_status',

    # Announcement functions
    'list_announcements',
    'create_announcement',
    'delete_announcement',

    # Stats functions
    'get_member_stats',

    # Configuration
    'StokvelAPIConfig',
    'StokvelEndpoints',
    'Endpoint',
]
