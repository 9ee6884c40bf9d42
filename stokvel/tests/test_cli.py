import io
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import MagicMock, patch

from stokvel import cli
from stokvel.config import settings
from stokvel.core.types import Contribution, Member
from stokvel.services.dashboard import DashboardService, DashboardState
from stokvel.tests.helpers import MockBackendMixin, admin_user, make_api


class TestCli(MockBackendMixin, unittest.TestCase):
    def setUp(self):
        self.start_backend()
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.session_file = Path(tmp.name) / "session.json"
        patcher = patch.object(settings, "SESSION_FILE", self.session_file)
        patcher.start()
        self.addCleanup(patcher.stop)

    def run_cli(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        args = ["--api-url", self.api_config.base_url, "--storage", "file", "--log-level", "CRITICAL", *argv]
        with redirect_stdout(stdout), redirect_stderr(stderr):
            code = cli.main(args)
        return code, stdout.getvalue(), stderr.getvalue()

    def login_admin(self):
        code, out, _ = self.run_cli("login", "admin@powerhouse.co.za", "--password", "admin123")
        self.assertEqual(code, 0)
        return out

    def test_login_persists_session_file(self):
        out = self.login_admin()

        self.assertIn("Logged in as Thandi Mokoena (admin)", out)
        self.assertTrue(self.session_file.exists())

        code, out, _ = self.run_cli("whoami")
        self.assertEqual(code, 0)
        self.assertIn("id=PH001 role=admin", out)

    def test_bad_password(self):
        code, _, err = self.run_cli("login", "admin@powerhouse.co.za", "--password", "wrong")

        self.assertEqual(code, 1)
        self.assertIn("Invalid email or password", err)
        self.assertFalse(self.session_file.exists())

    def test_commands_require_login(self):
        code, _, err = self.run_cli("dashboard")
        self.assertEqual(code, 1)
        self.assertIn("Not logged in", err)

    def test_logout_removes_session(self):
        self.login_admin()

        code, out, _ = self.run_cli("logout")

        self.assertEqual(code, 0)
        self.assertIn("Logged out", out)
        self.assertFalse(self.session_file.exists())

    def test_record_and_list_contributions(self):
        self.login_admin()

        code, out, _ = self.run_cli("add-contribution", "PH002", "March 2026", "--status", "Paid")
        self.assertEqual(code, 0)
        self.assertIn("Contribution recorded", out)

        code, out, _ = self.run_cli("contributions")
        self.assertEqual(code, 0)
        self.assertIn("Sipho Dlamini", out)
        self.assertIn("March 2026", out)
        self.assertIn("R 300", out)

    def test_unknown_member_contribution_rejected(self):
        self.login_admin()

        code, _, err = self.run_cli("add-contribution", "PH404", "March 2026")

        self.assertEqual(code, 1)
        self.assertIn("Select an existing member", err)

    def test_members_masks_id_and_reveals_bank_on_request(self):
        self.login_admin()

        code, out, _ = self.run_cli("members")
        self.assertEqual(code, 0)
        self.assertIn("800101***", out)
        self.assertNotIn("8001015009087", out)
        self.assertNotIn("62000000001", out)

        code, out, _ = self.run_cli("members", "--show-bank", "PH001")
        self.assertIn(cli.POPIA_NOTICE, out)
        self.assertIn("62000000001", out)

    def test_member_cannot_list_members(self):
        self.run_cli("login", "sipho@powerhouse.co.za", "--password", "member123")

        code, _, err = self.run_cli("members")

        self.assertEqual(code, 1)
        self.assertIn("Only administrators", err)

    def test_announce_and_dashboard(self):
        self.login_admin()
        self.run_cli("announce", "Year-end party", "Bring a plate", "--priority", "high")

        code, out, _ = self.run_cli("dashboard")

        self.assertEqual(code, 0)
        self.assertIn("Hi, Thandi!", out)
        self.assertIn("Year-end party", out)
        self.assertIn("No contributions yet", out)

    def test_revoked_token_sends_user_back_to_login(self):
        self.login_admin()
        self.server.store.revoke_tokens()

        code, _, err = self.run_cli("dashboard")

        self.assertEqual(code, 1)
        self.assertIn("Not logged in", err)
        self.assertFalse(self.session_file.exists())


class TestOutputWithMissingFields(unittest.TestCase):
    def setUp(self):
        self.service = DashboardService(MagicMock(), api=make_api())
        self.service.state = DashboardState(
            user=admin_user(),
            members=[Member(id="PH009", name=None)],
            contributions=[Contribution(id="7", member_id="PH009", month=None)]
        )

    def test_members_with_null_name(self):
        out = io.StringIO()
        with redirect_stdout(out):
            cli.print_members(self.service)
        self.assertIn("PH009", out.getvalue())

    def test_contributions_with_null_month(self):
        out = io.StringIO()
        with redirect_stdout(out):
            cli.print_contributions(self.service)
        self.assertIn("R 300", out.getvalue())


if __name__ == "__main__":
    unittest.main()
