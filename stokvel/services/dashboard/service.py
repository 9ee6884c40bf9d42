"""Dashboard state and the operations that change it

Every successful mutation is followed by a full reload; collections are
replaced wholesale, never patched. Operations catch their own errors, put
a message in the single error slot and return False.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set

from stokvel.core.api import create_api_service
from stokvel.core.error.exceptions import (PermissionDeniedError,
                                           SessionExpiredError, StokvelError,
                                           ValidationException)
from stokvel.core.error.handler import LOGIN_FAILED_MESSAGE, ErrorHandler
from stokvel.core.state.session import SessionManager
from stokvel.core.types import (Announcement, Contribution, DashboardData,
                                Member, NewAnnouncement, NewContribution,
                                NewMember, Stats, User)
from stokvel.core.utils.validators import (REQUIRED_FIELDS_MESSAGE,
                                           validate_announcement,
                                           validate_contribution,
                                           validate_member, validate_status)

from . import aggregates
from .loader import DataLoader

logger = logging.getLogger(__name__)


@dataclass
class DashboardState:
    """Everything the front end renders from"""
    user: Optional[User] = None
    contributions: List[Contribution] = field(default_factory=list)
    announcements: List[Announcement] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    stats: Stats = field(default_factory=Stats)
    loading: bool = False
    error: Optional[str] = None
    revealed_bank_details: Set[str] = field(default_factory=set)

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin


class DashboardService:
    """Headless dashboard controller"""

    def __init__(
        self,
        session_manager: SessionManager,
        api: Optional[Dict[str, Callable]] = None,
        loader: Optional[DataLoader] = None
    ):
        self.session_manager = session_manager
        self.api = api or create_api_service(session_manager, session_manager.api_config)
        self.loader = loader or DataLoader(self.api)
        self.state = DashboardState()
        session_manager.add_unauthorized_listener(self._reset)

    # Session

    def start(self) -> bool:
        """Restore a stored session and load its data

        Returns:
            bool: True when a session was restored
        """
        session = self.session_manager.restore()
        if session is None:
            self._reset()
            return False
        self.state = DashboardState(user=session.user)
        self.reload()
        return self.state.is_authenticated

    def login(self, email: str, password: str) -> bool:
        if self.state.loading:
            logger.warning("Login ignored while another operation is in progress")
            return False

        self.state.loading = True
        self.state.error = None
        try:
            if not email or not password:
                raise ValidationException(REQUIRED_FIELDS_MESSAGE, field="email" if not email else "password")
            session = self.session_manager.login(email, password)
        except StokvelError as e:
            self.state.error = ErrorHandler.user_message(e, LOGIN_FAILED_MESSAGE, prefer_server_message=True)
            return False
        finally:
            self.state.loading = False

        self.state = DashboardState(user=session.user)
        self.reload()
        return True

    def logout(self) -> None:
        self.session_manager.logout()
        self._reset()

    def reload(self) -> bool:
        return self._run(self._reload_now, fallback=None)

    # Members

    def add_member(self, member: NewMember) -> bool:
        def action():
            self._require_admin("add_member")
            self.api["create_member"](validate_member(member))
            self._reload_now()
        return self._run(action, "Failed to add member", prefer_server_message=True)

    def delete_member(self, member_id: str) -> bool:
        def action():
            self._require_admin("delete_member")
            self.api["delete_member"](member_id)
            self.state.revealed_bank_details.discard(str(member_id))
            self._reload_now()
        return self._run(action, "Failed to delete member")

    def toggle_bank_details(self, member_id: str) -> bool:
        """Show or hide a member's banking details

        Returns:
            bool: Whether the details are now revealed
        """
        if not self.state.is_admin:
            logger.warning("Bank details requested by non-admin user")
            return False
        member_id = str(member_id)
        revealed = self.state.revealed_bank_details
        if member_id in revealed:
            revealed.discard(member_id)
            return False
        revealed.add(member_id)
        return True

    def is_bank_details_revealed(self, member_id: str) -> bool:
        return self.state.is_admin and str(member_id) in self.state.revealed_bank_details

    # Contributions

    def add_contribution(self, contribution: NewContribution) -> bool:
        def action():
            self._require_admin("add_contribution")
            validate_contribution(contribution)
            if self.state.members and not any(
                m.id == str(contribution.member_id) for m in self.state.members
            ):
                raise ValidationException(
                    "Select an existing member",
                    field="member_id",
                    value=str(contribution.member_id)
                )
            self.api["create_contribution"](contribution)
            self._reload_now()
        return self._run(action, "Failed to add contribution")

    def update_contribution_status(self, contribution_id: str, status: str) -> bool:
        def action():
            self._require_admin("update_contribution_status")
            self.api["update_contribution_status"](contribution_id, validate_status(status))
            self._reload_now()
        return self._run(action, "Failed to update contribution")

    # Announcements

    def add_announcement(self, announcement: NewAnnouncement) -> bool:
        def action():
            self._require_admin("add_announcement")
            self.api["create_announcement"](validate_announcement(announcement))
            self._reload_now()
        return self._run(action, "Failed to add announcement")

    def delete_announcement(self, announcement_id: str) -> bool:
        def action():
            self._require_admin("delete_announcement")
            self.api["delete_announcement"](announcement_id)
            self._reload_now()
        return self._run(action, "Failed to delete announcement")

    # Banner

    def dismiss_error(self) -> None:
        self.state.error = None

    # Derived views

    def my_recent_contributions(self) -> List[Contribution]:
        if not self.state.user:
            return []
        return aggregates.member_contributions(
            self.state.contributions,
            self.state.user.id,
            limit=aggregates.DASHBOARD_CONTRIBUTIONS_LIMIT
        )

    def latest_announcements(self) -> List[Announcement]:
        return aggregates.recent_announcements(self.state.announcements)

    def visible_contributions(self) -> List[Contribution]:
        if not self.state.user:
            return []
        return aggregates.visible_contributions(self.state.contributions, self.state.user)

    def member_name(self, member_id: str) -> str:
        return aggregates.member_name(self.state.members, member_id)

    # Internals

    def _run(self, action: Callable[[], None], fallback: Optional[str], prefer_server_message: bool = False) -> bool:
        if self.state.loading:
            logger.warning("Operation ignored while another is in progress")
            return False

        self.state.loading = True
        try:
            action()
            self.state.error = None
            return True
        except SessionExpiredError as e:
            ErrorHandler.log(e)
            self._reset()
            return False
        except StokvelError as e:
            self.state.error = ErrorHandler.user_message(e, fallback, prefer_server_message)
            return False
        finally:
            self.state.loading = False

    def _reload_now(self) -> None:
        session = self.session_manager.session
        if session is None:
            raise SessionExpiredError(action="reload_all")
        self._apply(self.loader.reload_all(session))

    def _apply(self, data: DashboardData) -> None:
        self.state.contributions = data.contributions
        self.state.announcements = data.announcements
        self.state.stats = data.stats
        self.state.members = data.members if data.members is not None else []
        known = {m.id for m in self.state.members}
        self.state.revealed_bank_details &= known

    def _require_admin(self, action: str) -> None:
        if not self.state.is_admin:
            raise PermissionDeniedError(action=action)

    def _reset(self) -> None:
        """Back to the logged-out view with nothing loaded"""
        self.state = DashboardState()
