"""Main API client using pure functions"""
import logging
from typing import Any, Callable, Dict, Optional

from .announcements import (create_announcement, delete_announcement,
                            list_announcements)
from .config import StokvelAPIConfig
from .contributions import (create_contribution, list_contributions,
                            update_contribution_status)
from .members import (create_member, delete_member, get_member, list_members,
                      update_member)
from .stats import get_member_stats

logger = logging.getLogger(__name__)


def create_api_service(
    session_manager: Any,
    api_config: Optional[StokvelAPIConfig] = None
) -> Dict[str, Callable]:
    """Create API service with all available operations

    Args:
        session_manager: Session manager supplying the token and 401 handling
        api_config: Backend configuration, read from the environment when omitted

    Returns:
        Dict[str, Callable]: Dictionary of API operations
    """
    api_config = api_config or StokvelAPIConfig.from_env()
    logger.debug(f"API service bound to {api_config.base_url}")

    return {
        # Member operations
        "list_members": lambda: list_members(session_manager, api_config),
        "get_member": lambda member_id: get_member(session_manager, member_id, api_config),
        "create_member": lambda member: create_member(session_manager, member, api_config),
        "update_member": lambda member_id, data: update_member(session_manager, member_id, data, api_config),
        "delete_member": lambda member_id: delete_member(session_manager, member_id, api_config),

        # Contribution operations
        "list_contributions": lambda: list_contributions(session_manager, api_config),
        "create_contribution": lambda contribution: create_contribution(session_manager, contribution, api_config),
        "update_contribution_status": lambda contribution_id, status: update_contribution_status(
            session_manager,
            contribution_id,
            status,
            api_config
        ),

        # Announcement operations
        "list_announcements": lambda: list_announcements(session_manager, api_config),
        "create_announcement": lambda announcement: create_announcement(session_manager, announcement, api_config),
        "delete_announcement": lambda announcement_id: delete_announcement(session_manager, announcement_id, api_config),

        # Stats operations
        "get_member_stats": lambda member_id: get_member_stats(session_manager, member_id, api_config),
    }
