"""Member API operations"""
from typing import Any, Dict, List, Optional

from stokvel.core.types import Member, NewMember

from .base import make_api_request, parse_record, parse_records


def list_members(session_manager: Any, api_config=None) -> List[Member]:
    data = make_api_request('members', 'list', session_manager, api_config=api_config)
    return parse_records(data, Member.from_api, 'members.list')


def get_member(session_manager: Any, member_id: str, api_config=None) -> Member:
    data = make_api_request(
        'members', 'get', session_manager,
        path_params={"member_id": member_id},
        api_config=api_config
    )
    return parse_record(data, Member.from_api, 'members.get')


def create_member(session_manager: Any, member: NewMember, api_config=None) -> Optional[Dict[str, Any]]:
    return make_api_request(
        'members', 'create', session_manager,
        payload=member.to_payload(),
        api_config=api_config
    )


def update_member(
    session_manager: Any,
    member_id: str,
    data: Dict[str, Any],
    api_config=None
) -> Optional[Dict[str, Any]]:
    """Update a member; ``data`` uses the backend's request field names"""
    return make_api_request(
        'members', 'update', session_manager,
        payload=data,
        path_params={"member_id": member_id},
        api_config=api_config
    )


def delete_member(session_manager: Any, member_id: str, api_config=None) -> None:
    make_api_request(
        'members', 'delete', session_manager,
        path_params={"member_id": member_id},
        api_config=api_config
    )
