import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from stokvel.core.error.exceptions import ConfigurationException, StorageError
from stokvel.core.state import (FileSessionStorage, MemorySessionStorage,
                                RedisConfig, RedisSessionStorage,
                                create_storage)


class TestRedisSessionStorage(unittest.TestCase):
    def setUp(self):
        self.client = MagicMock()
        self.storage = RedisSessionStorage(self.client, key_prefix="test:")

    def test_set_uses_prefixed_key_without_expiry(self):
        self.storage.set("token", "abc")
        self.client.set.assert_called_once_with("test:token", "abc", ex=None)

    def test_get_decodes_bytes(self):
        self.client.get.return_value = b"abc"
        self.assertEqual(self.storage.get("token"), "abc")
        self.client.get.assert_called_once_with("test:token")

    def test_get_missing(self):
        self.client.get.return_value = None
        self.assertIsNone(self.storage.get("user"))

    def test_delete_both_keys_in_one_call(self):
        self.storage.delete("token", "user")
        self.client.delete.assert_called_once_with("test:token", "test:user")

    def test_redis_errors_become_storage_errors(self):
        self.client.get.side_effect = RedisConnectionError("down")
        with self.assertRaises(StorageError):
            self.storage.get("token")

        self.client.set.side_effect = RedisConnectionError("down")
        with self.assertRaises(StorageError):
            self.storage.set("token", "x")


class TestRedisConfig(unittest.TestCase):
    def test_parses_url(self):
        config = RedisConfig("redis://:secret@cache.local:6380/2")
        self.assertEqual(config.host, "cache.local")
        self.assertEqual(config.port, 6380)
        self.assertEqual(config.password, "secret")
        self.assertEqual(config.db, 2)

    def test_defaults(self):
        config = RedisConfig("redis://")
        self.assertEqual(config.host, "localhost")
        self.assertEqual(config.port, 6379)
        self.assertEqual(config.db, 0)


class TestFileSessionStorage(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.path = Path(self.tmp.name) / "nested" / "session.json"
        self.storage = FileSessionStorage(self.path)

    def test_round_trip_survives_new_instance(self):
        self.storage.set("token", "abc")
        self.storage.set("user", '{"id": "PH001"}')

        reopened = FileSessionStorage(self.path)
        self.assertEqual(reopened.get("token"), "abc")
        self.assertEqual(reopened.get("user"), '{"id": "PH001"}')

    @unittest.skipIf(os.name == "nt", "POSIX permissions")
    def test_file_is_private(self):
        self.storage.set("token", "abc")
        self.assertEqual(self.path.stat().st_mode & 0o777, 0o600)

    def test_deleting_everything_removes_file(self):
        self.storage.set("token", "abc")
        self.storage.delete("token", "user")
        self.assertFalse(self.path.exists())
        self.assertIsNone(self.storage.get("token"))

    def test_corrupted_file_reads_as_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{broken")
        self.assertIsNone(self.storage.get("token"))


class TestCreateStorage(unittest.TestCase):
    def test_memory_backend(self):
        storage = create_storage("memory")
        self.assertIsInstance(storage, MemorySessionStorage)
        storage.set("token", "x")
        storage.delete("token", "missing")
        self.assertIsNone(storage.get("token"))

    def test_file_backend(self):
        self.assertIsInstance(create_storage("FILE"), FileSessionStorage)

    def test_unknown_backend(self):
        with self.assertRaises(ConfigurationException):
            create_storage("localstorage")


if __name__ == "__main__":
    unittest.main()
