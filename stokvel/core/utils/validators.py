"""Client-side input validation

Required fields are checked before any request is sent so an incomplete
form never reaches the backend.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from stokvel.core.error.exceptions import ValidationException
from stokvel.core.types import (SETTABLE_STATUSES, NewAnnouncement,
                                NewContribution, NewMember, Priority)

REQUIRED_FIELDS_MESSAGE = "Please fill in all required fields"

MEMBER_REQUIRED = ("name", "email", "id_number")
CONTRIBUTION_REQUIRED = ("member_id", "month")
ANNOUNCEMENT_REQUIRED = ("title", "message")


@dataclass
class ValidationResult:
    """Result of form validation

    Attributes:
        is_valid: Whether validation passed
        error_message: Message for the user if validation failed
        missing_fields: Required fields left empty
    """
    is_valid: bool
    error_message: Optional[str] = None
    missing_fields: List[str] = field(default_factory=list)

    def raise_for_error(self) -> None:
        if not self.is_valid:
            first = self.missing_fields[0] if self.missing_fields else "value"
            raise ValidationException(self.error_message, field=first)


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def check_required(data: Dict[str, Any], required: Iterable[str]) -> ValidationResult:
    """Check that every required field holds a non-blank value"""
    missing = [name for name in required if _is_blank(data.get(name))]
    if missing:
        return ValidationResult(
            is_valid=False,
            error_message=REQUIRED_FIELDS_MESSAGE,
            missing_fields=missing
        )
    return ValidationResult(is_valid=True)


def validate_member(member: NewMember) -> NewMember:
    check_required(vars(member), MEMBER_REQUIRED).raise_for_error()
    return member


def validate_contribution(contribution: NewContribution) -> NewContribution:
    check_required(vars(contribution), CONTRIBUTION_REQUIRED).raise_for_error()
    validate_status(contribution.status)
    try:
        amount = float(contribution.amount)
    except (TypeError, ValueError):
        raise ValidationException("Amount must be a number", field="amount", value=str(contribution.amount))
    if amount < 0:
        raise ValidationException("Amount cannot be negative", field="amount", value=str(contribution.amount))
    return contribution


def validate_announcement(announcement: NewAnnouncement) -> NewAnnouncement:
    check_required(vars(announcement), ANNOUNCEMENT_REQUIRED).raise_for_error()
    allowed = [p.value for p in Priority]
    if announcement.priority not in allowed:
        raise ValidationException(
            f"Priority must be one of: {', '.join(allowed)}",
            field="priority",
            value=announcement.priority
        )
    return announcement


def validate_status(status: str) -> str:
    """Only Paid and Pending can be set from the client"""
    if status not in SETTABLE_STATUSES:
        raise ValidationException(
            f"Status must be one of: {', '.join(SETTABLE_STATUSES)}",
            field="status",
            value=status
        )
    return status
