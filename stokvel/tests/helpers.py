"""Shared test fixtures"""
import json
import threading
from typing import Any, Dict, Optional
from unittest.mock import MagicMock

import requests

from stokvel.core.api import StokvelAPIConfig
from stokvel.core.types import (Announcement, Contribution, Member, Stats,
                                User)
from stokvel.mock.server import MockStokvelServer

API_CONFIG = StokvelAPIConfig(base_url="http://backend.test/api", timeout=5)

ADMIN_USER = {"id": "PH001", "name": "Thandi Mokoena", "role": "admin", "status": "Active"}
MEMBER_USER = {"id": "PH002", "name": "Sipho Dlamini", "role": "member", "status": "Active"}


def make_response(status_code: int = 200, body: Any = None) -> requests.Response:
    """Build a real requests.Response with a JSON body"""
    response = requests.Response()
    response.status_code = status_code
    response.url = "http://backend.test/api"
    if body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


def make_api(
    contributions=None,
    announcements=None,
    members=None,
    stats: Optional[Stats] = None
) -> Dict[str, MagicMock]:
    """API service dict whose list calls return fixed data"""
    return {
        "list_contributions": MagicMock(return_value=list(contributions or [])),
        "list_announcements": MagicMock(return_value=list(announcements or [])),
        "list_members": MagicMock(return_value=list(members or [])),
        "get_member_stats": MagicMock(return_value=stats or Stats()),
        "get_member": MagicMock(),
        "create_member": MagicMock(return_value={"id": "PH003"}),
        "update_member": MagicMock(),
        "delete_member": MagicMock(return_value=None),
        "create_contribution": MagicMock(return_value={"id": 10}),
        "update_contribution_status": MagicMock(),
        "create_announcement": MagicMock(return_value={"id": 5}),
        "delete_announcement": MagicMock(return_value=None),
    }


def sample_members():
    return [Member.from_api(dict(ADMIN_USER)), Member.from_api(dict(MEMBER_USER))]


def sample_contributions():
    return [
        Contribution(id="1", member_id="PH001", month="January 2026", amount=300, status="Paid"),
        Contribution(id="2", member_id="PH002", month="January 2026", amount=300, status="Pending"),
    ]


def sample_announcements():
    return [Announcement(id="1", title="Meeting", message="Sunday 2pm", priority="high")]


def admin_user() -> User:
    return User.from_api(ADMIN_USER)


def member_user() -> User:
    return User.from_api(MEMBER_USER)


class MockBackendMixin:
    """Runs the mock backend on an ephemeral port for each test"""

    def start_backend(self) -> MockStokvelServer:
        self.server = MockStokvelServer(("127.0.0.1", 0))
        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()
        self.addCleanup(self.stop_backend)
        self.api_config = StokvelAPIConfig(base_url=self.server.base_url, timeout=5)
        return self.server

    def stop_backend(self) -> None:
        self.server.shutdown()
        self.server.server_close()
        self.server_thread.join(timeout=5)
