import json
import unittest
from unittest.mock import MagicMock, patch

from stokvel.core.error.exceptions import AuthError, StorageError
from stokvel.core.state import (TOKEN_KEY, USER_KEY, MemorySessionStorage,
                                SessionManager, SessionState)
from stokvel.tests.helpers import ADMIN_USER, MEMBER_USER

LOGIN = "stokvel.core.api.auth.login"


class TestSessionManager(unittest.TestCase):
    def setUp(self):
        self.storage = MemorySessionStorage()
        self.manager = SessionManager(self.storage)

    @patch(LOGIN)
    def test_login_persists_token_and_user(self, mock_login):
        mock_login.return_value = {"token": "tok-1", "user": dict(ADMIN_USER)}

        session = self.manager.login("admin@powerhouse.co.za", "admin123")

        self.assertEqual(session.token, "tok-1")
        self.assertTrue(session.user.is_admin)
        self.assertEqual(self.manager.state, SessionState.AUTHENTICATED)
        self.assertEqual(self.storage.get(TOKEN_KEY), "tok-1")
        self.assertEqual(json.loads(self.storage.get(USER_KEY))["id"], "PH001")

    @patch(LOGIN)
    def test_failed_login_keeps_existing_session(self, mock_login):
        mock_login.return_value = {"token": "tok-1", "user": dict(MEMBER_USER)}
        self.manager.login("sipho@powerhouse.co.za", "member123")

        mock_login.side_effect = AuthError("Invalid email or password")
        with self.assertRaises(AuthError):
            self.manager.login("sipho@powerhouse.co.za", "wrong")

        self.assertTrue(self.manager.is_authenticated)
        self.assertEqual(self.manager.user.id, "PH002")
        self.assertEqual(self.storage.get(TOKEN_KEY), "tok-1")

    @patch(LOGIN)
    def test_login_response_without_token_is_rejected(self, mock_login):
        mock_login.return_value = {"user": dict(ADMIN_USER)}

        with self.assertRaises(AuthError):
            self.manager.login("a@b.c", "pw")

        self.assertEqual(self.manager.state, SessionState.UNAUTHENTICATED)
        self.assertIsNone(self.storage.get(TOKEN_KEY))

    @patch(LOGIN)
    def test_logout_then_restore_yields_nothing(self, mock_login):
        mock_login.return_value = {"token": "tok-1", "user": dict(ADMIN_USER)}
        self.manager.login("admin@powerhouse.co.za", "admin123")

        self.manager.logout()

        self.assertIsNone(self.manager.session)
        self.assertIsNone(SessionManager(self.storage).restore())
        self.assertIsNone(self.storage.get(TOKEN_KEY))
        self.assertIsNone(self.storage.get(USER_KEY))

    @patch(LOGIN)
    def test_restore_does_not_contact_server(self, mock_login):
        self.storage.set(TOKEN_KEY, "stale-token")
        self.storage.set(USER_KEY, json.dumps(MEMBER_USER))

        session = self.manager.restore()

        mock_login.assert_not_called()
        self.assertEqual(session.token, "stale-token")
        self.assertEqual(session.user.name, "Sipho Dlamini")
        self.assertFalse(session.user.is_admin)

    def test_restore_requires_both_keys(self):
        self.storage.set(TOKEN_KEY, "token-only")
        self.assertIsNone(self.manager.restore())

    def test_restore_with_corrupted_user(self):
        self.storage.set(TOKEN_KEY, "tok")
        self.storage.set(USER_KEY, "{not json")
        self.assertIsNone(self.manager.restore())
        self.assertEqual(self.manager.state, SessionState.UNAUTHENTICATED)

    def test_on_unauthorized_clears_and_notifies(self):
        self.storage.set(TOKEN_KEY, "tok")
        self.storage.set(USER_KEY, json.dumps(ADMIN_USER))
        self.manager.restore()
        listener = MagicMock()
        self.manager.add_unauthorized_listener(listener)

        self.manager.on_unauthorized()

        listener.assert_called_once_with()
        self.assertIsNone(self.manager.session)
        self.assertIsNone(self.manager.get_token())

    def test_failing_listener_does_not_stop_others(self):
        first = MagicMock(side_effect=RuntimeError("boom"))
        second = MagicMock()
        self.manager.add_unauthorized_listener(first)
        self.manager.add_unauthorized_listener(second)

        self.manager.on_unauthorized()

        second.assert_called_once_with()

    def test_logout_survives_storage_failure(self):
        storage = MagicMock()
        storage.delete.side_effect = StorageError("redis down")
        manager = SessionManager(storage)

        manager.logout()

        self.assertEqual(manager.state, SessionState.UNAUTHENTICATED)

    def test_restore_survives_storage_failure(self):
        storage = MagicMock()
        storage.get.side_effect = StorageError("redis down")
        self.assertIsNone(SessionManager(storage).restore())


class FailingUserWrite(MemorySessionStorage):
    """Memory storage whose user write fails once ``fail_user`` is set"""

    def __init__(self):
        super().__init__()
        self.fail_user = False

    def set(self, key, value):
        if key == USER_KEY and self.fail_user:
            raise StorageError("disk full")
        super().set(key, value)


class TestPartialPersistence(unittest.TestCase):
    def setUp(self):
        self.storage = FailingUserWrite()
        self.manager = SessionManager(self.storage)

    @patch(LOGIN)
    def test_failed_user_write_keeps_previous_session(self, mock_login):
        mock_login.return_value = {"token": "tok-A", "user": dict(MEMBER_USER)}
        self.manager.login("sipho@powerhouse.co.za", "member123")

        mock_login.return_value = {"token": "tok-B", "user": dict(ADMIN_USER)}
        self.storage.fail_user = True
        with self.assertRaises(StorageError):
            self.manager.login("admin@powerhouse.co.za", "admin123")

        self.assertEqual(self.manager.user.id, "PH002")
        self.assertEqual(self.manager.get_token(), "tok-A")
        self.assertEqual(json.loads(self.storage.get(USER_KEY))["id"], "PH002")
        self.assertEqual(SessionManager(self.storage).restore().token, "tok-A")

    @patch(LOGIN)
    def test_failed_first_login_leaves_nothing_stored(self, mock_login):
        mock_login.return_value = {"token": "tok-B", "user": dict(ADMIN_USER)}
        self.storage.fail_user = True

        with self.assertRaises(StorageError):
            self.manager.login("admin@powerhouse.co.za", "admin123")

        self.assertEqual(self.manager.state, SessionState.UNAUTHENTICATED)
        self.assertIsNone(self.storage.get(TOKEN_KEY))
        self.assertIsNone(self.storage.get(USER_KEY))

    def test_unreadable_storage_drops_restored_session(self):
        self.storage.set(TOKEN_KEY, "tok")
        self.storage.set(USER_KEY, json.dumps(MEMBER_USER))
        self.assertIsNotNone(self.manager.restore())

        with patch.object(self.storage, "get", side_effect=StorageError("redis down")):
            self.assertIsNone(self.manager.restore())

        self.assertIsNone(self.manager.session)
        self.assertEqual(self.manager.state, SessionState.UNAUTHENTICATED)


if __name__ == "__main__":
    unittest.main()
