"""View-derived aggregates

Pure functions over the loaded collections. None of them mutate their
input, and all accept empty collections and records with missing
optional fields.
"""
from typing import Dict, Iterable, List, Optional, Union

from stokvel.core.types import (Announcement, Contribution,
                                ContributionStatus, Member, User)

UNKNOWN_MEMBER = "Unknown"
DASHBOARD_CONTRIBUTIONS_LIMIT = 5
DASHBOARD_ANNOUNCEMENTS_LIMIT = 3


def _get(record, name, default=None):
    # Dict records come straight from the wire, dataclasses from the API layer
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)


def member_contributions(
    contributions: Iterable[Union[Contribution, Dict]],
    member_id: str,
    limit: Optional[int] = None
) -> List[Union[Contribution, Dict]]:
    """Contributions belonging to one member in arrival order"""
    matches = [c for c in contributions if str(_get(c, "member_id")) == str(member_id)]
    return matches if limit is None else matches[:limit]


def recent_announcements(
    announcements: Iterable[Union[Announcement, Dict]],
    limit: int = DASHBOARD_ANNOUNCEMENTS_LIMIT
) -> List[Union[Announcement, Dict]]:
    """First ``limit`` announcements in server order"""
    return list(announcements)[:limit]


def visible_contributions(contributions: Iterable[Contribution], user: User) -> List[Contribution]:
    """Admins see every contribution, members only their own"""
    if user.is_admin:
        return list(contributions)
    return member_contributions(contributions, user.id)


def member_name(members: Optional[Iterable[Member]], member_id: str) -> str:
    """Member's name, or "Unknown" when the member no longer exists"""
    for member in members or []:
        if str(_get(member, "id")) == str(member_id):
            return _get(member, "name") or UNKNOWN_MEMBER
    return UNKNOWN_MEMBER


def paid_count(contributions: Iterable[Contribution], member_id: str) -> int:
    return sum(
        1 for c in member_contributions(contributions, member_id)
        if _get(c, "status") == ContributionStatus.PAID.value
    )


def masked_id_number(id_number: Optional[str]) -> str:
    """First six digits of the ID number followed by ***"""
    if not id_number:
        return ""
    return f"{id_number[:6]}***"


def bank_details(member: Member) -> Dict[str, Optional[str]]:
    return {
        "bank_name": _get(member, "bank_name"),
        "account_holder": _get(member, "account_holder"),
        "account_number": _get(member, "account_number"),
        "branch_code": _get(member, "branch_code"),
    }


def format_rand(value) -> str:
    """Amount in rand with thousands separators, e.g. R 1,200"""
    if value is None:
        return "R 0"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return f"R {value}"
    if number.is_integer():
        return f"R {int(number):,}"
    return f"R {number:,.2f}"


def first_name(name: Optional[str]) -> str:
    parts = (name or "").split()
    return parts[0] if parts else ""
