from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Role(Enum):
    """Roles a user can have in the club"""
    MEMBER = "member"
    ADMIN = "admin"


class ContributionStatus(Enum):
    """Contribution states

    OVERDUE is only ever read from the backend, the client never sets it.
    """
    PAID = "Paid"
    PENDING = "Pending"
    OVERDUE = "Overdue"


class Priority(Enum):
    """Announcement priority"""
    NORMAL = "normal"
    HIGH = "high"


SETTABLE_STATUSES = (ContributionStatus.PAID.value, ContributionStatus.PENDING.value)
DEFAULT_CONTRIBUTION_AMOUNT = 300
DEFAULT_MEMBER_PASSWORD = "member123"


@dataclass
class User:
    """Logged in user as returned by the login endpoint"""
    id: str
    name: str
    role: str = Role.MEMBER.value
    status: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            role=data.get("role") or Role.MEMBER.value,
            status=data.get("status"),
            email=data.get("email"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class Session:
    """Bearer token plus the user it belongs to"""
    token: str
    user: User


@dataclass
class Member:
    """Club member record, banking details included for admins"""
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    id_number: Optional[str] = None
    status: Optional[str] = None
    role: str = Role.MEMBER.value
    bank_name: Optional[str] = None
    account_holder: Optional[str] = None
    account_number: Optional[str] = None
    branch_code: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Member":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            email=data.get("email"),
            phone=data.get("phone"),
            id_number=data.get("id_number"),
            status=data.get("status"),
            role=data.get("role") or Role.MEMBER.value,
            bank_name=data.get("bank_name"),
            account_holder=data.get("account_holder"),
            account_number=data.get("account_number"),
            branch_code=data.get("branch_code"),
        )


@dataclass
class NewMember:
    """Payload for creating a member"""
    name: str
    email: str
    id_number: str
    phone: str = ""
    password: str = DEFAULT_MEMBER_PASSWORD
    status: str = "Active"
    role: str = Role.MEMBER.value
    bank_name: str = ""
    account_holder: str = ""
    account_number: str = ""
    branch_code: str = ""

    def to_payload(self) -> Dict[str, Any]:
        """Request body in the backend's camelCase names"""
        return {
            "name": self.name,
            "idNumber": self.id_number,
            "phone": self.phone,
            "email": self.email,
            "password": self.password,
            "status": self.status,
            "role": self.role,
            "bankName": self.bank_name,
            "accountHolder": self.account_holder,
            "accountNumber": self.account_number,
            "branchCode": self.branch_code,
        }


@dataclass
class Contribution:
    """Monthly contribution record"""
    id: str
    member_id: str
    month: str
    amount: float = DEFAULT_CONTRIBUTION_AMOUNT
    status: str = ContributionStatus.PENDING.value
    date_paid: Optional[str] = None

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Contribution":
        amount = data.get("amount")
        return cls(
            id=str(data["id"]),
            member_id=str(data.get("member_id", "")),
            month=data.get("month", ""),
            amount=DEFAULT_CONTRIBUTION_AMOUNT if amount is None else amount,
            status=data.get("status") or ContributionStatus.PENDING.value,
            date_paid=data.get("date_paid"),
        )


@dataclass
class NewContribution:
    """Payload for recording a contribution"""
    member_id: str
    month: str
    amount: float = DEFAULT_CONTRIBUTION_AMOUNT
    status: str = ContributionStatus.PENDING.value
    date: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "memberId": self.member_id,
            "month": self.month,
            "amount": self.amount,
            "status": self.status,
            "date": self.date,
        }


@dataclass
class Announcement:
    """Club announcement"""
    id: str
    title: str
    message: str
    priority: str = Priority.NORMAL.value
    announcement_date: Optional[str] = None

    @property
    def is_high_priority(self) -> bool:
        return self.priority == Priority.HIGH.value

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Announcement":
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            message=data.get("message", ""),
            priority=data.get("priority") or Priority.NORMAL.value,
            announcement_date=data.get("announcement_date"),
        )


@dataclass
class NewAnnouncement:
    """Payload for posting an announcement"""
    title: str
    message: str
    priority: str = Priority.NORMAL.value

    def to_payload(self) -> Dict[str, Any]:
        return {"title": self.title, "message": self.message, "priority": self.priority}


@dataclass
class Stats:
    """Server computed savings summary for one member"""
    total_saved: float = 0
    months_contributed: int = 0
    estimated_payout: float = 0

    @classmethod
    def from_api(cls, data: Optional[Dict[str, Any]]) -> "Stats":
        data = data or {}
        return cls(
            total_saved=data.get("totalSaved") or 0,
            months_contributed=data.get("monthsContributed") or 0,
            estimated_payout=data.get("estimatedPayout") or 0,
        )


@dataclass
class DashboardData:
    """One complete reload of every collection"""
    contributions: List[Contribution] = field(default_factory=list)
    announcements: List[Announcement] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    members: Optional[List[Member]] = None
