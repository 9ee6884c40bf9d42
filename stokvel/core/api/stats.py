"""Stats API operations"""
from typing import Any

from stokvel.core.types import Stats

from .base import make_api_request


def get_member_stats(session_manager: Any, member_id: str, api_config=None) -> Stats:
    """Server computed totals for one member"""
    data = make_api_request(
        'stats', 'member', session_manager,
        path_params={"member_id": member_id},
        api_config=api_config
    )
    return Stats.from_api(data if isinstance(data, dict) else None)
