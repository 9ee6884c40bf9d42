"""Announcement API operations"""
from typing import Any, Dict, List, Optional

from stokvel.core.types import Announcement, NewAnnouncement

from .base import make_api_request, parse_records


def list_announcements(session_manager: Any, api_config=None) -> List[Announcement]:
    data = make_api_request('announcements', 'list', session_manager, api_config=api_config)
    return parse_records(data, Announcement.from_api, 'announcements.list')


def create_announcement(
    session_manager: Any,
    announcement: NewAnnouncement,
    api_config=None
) -> Optional[Dict[str, Any]]:
    return make_api_request(
        'announcements', 'create', session_manager,
        payload=announcement.to_payload(),
        api_config=api_config
    )


def delete_announcement(session_manager: Any, announcement_id: str, api_config=None) -> None:
    make_api_request(
        'announcements', 'delete', session_manager,
        path_params={"announcement_id": announcement_id},
        api_config=api_config
    )
