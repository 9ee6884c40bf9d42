"""Contribution API operations"""
from typing import Any, Dict, List, Optional

from stokvel.core.types import Contribution, NewContribution

from .base import make_api_request, parse_records


def list_contributions(session_manager: Any, api_config=None) -> List[Contribution]:
    data = make_api_request('contributions', 'list', session_manager, api_config=api_config)
    return parse_records(data, Contribution.from_api, 'contributions.list')


def create_contribution(
    session_manager: Any,
    contribution: NewContribution,
    api_config=None
) -> Optional[Dict[str, Any]]:
    return make_api_request(
        'contributions', 'create', session_manager,
        payload=contribution.to_payload(),
        api_config=api_config
    )


def update_contribution_status(
    session_manager: Any,
    contribution_id: str,
    status: str,
    api_config=None
) -> Optional[Dict[str, Any]]:
    return make_api_request(
        'contributions', 'update_status', session_manager,
        payload={"status": status},
        path_params={"contribution_id": contribution_id},
        api_config=api_config
    )
