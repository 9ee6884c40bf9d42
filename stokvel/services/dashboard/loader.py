"""Full reload of every dashboard collection"""
import logging
from typing import Callable, Dict

from stokvel.core.error.exceptions import (ReloadError, SessionExpiredError,
                                           StokvelError)
from stokvel.core.types import DashboardData, Session

logger = logging.getLogger(__name__)

RELOAD_FAILED_MESSAGE = "Failed to load data. Please try again."


class DataLoader:
    """Re-fetches contributions, announcements, members (admin) and stats

    Fetches run one after another. The first failure aborts the rest and
    nothing is returned, so callers keep whatever they loaded before.
    """

    def __init__(self, api: Dict[str, Callable]):
        self.api = api

    def reload_all(self, session: Session) -> DashboardData:
        """Fetch every collection for the session's user

        Raises:
            SessionExpiredError: The backend rejected the token
            ReloadError: Any other fetch failed
        """
        user = session.user
        logger.debug(f"Reloading dashboard for {user.id} ({user.role})")

        try:
            contributions = self.api["list_contributions"]()
            announcements = self.api["list_announcements"]()
            members = self.api["list_members"]() if user.is_admin else None
            stats = self.api["get_member_stats"](user.id)
        except SessionExpiredError:
            raise
        except StokvelError as e:
            logger.error(f"Reload aborted: {e.message}")
            raise ReloadError(RELOAD_FAILED_MESSAGE, action="reload_all") from e

        logger.info(
            f"Reloaded {len(contributions)} contributions, {len(announcements)} announcements"
            + (f", {len(members)} members" if members is not None else "")
        )
        return DashboardData(
            contributions=contributions,
            announcements=announcements,
            stats=stats,
            members=members
        )
