"""Durable session storage backends"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional

from redis.exceptions import RedisError

from stokvel.config import settings
from stokvel.core.error.exceptions import ConfigurationException, StorageError

from .config import RedisConfig
from .interface import SessionStorageInterface

logger = logging.getLogger(__name__)


class RedisSessionStorage(SessionStorageInterface):
    """Redis-backed session storage"""

    def __init__(self, redis_client=None, key_prefix: str = None, ttl: Optional[int] = None):
        """Initialize with optional Redis client

        Args:
            redis_client: Existing client, built from REDIS_URL when omitted
            key_prefix: Namespace for the two session keys
            ttl: Optional expiry in seconds, the session never expires by default
        """
        self.redis = redis_client or RedisConfig().get_client()
        self.key_prefix = key_prefix if key_prefix is not None else settings.SESSION_PREFIX
        self.ttl = ttl

    def _get_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(self._get_key(key))
        except RedisError as e:
            logger.error(f"Redis error getting {key}: {str(e)}")
            raise StorageError("Failed to read session", cause=e) from e

        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.redis.set(self._get_key(key), value, ex=self.ttl)
        except RedisError as e:
            logger.error(f"Redis error setting {key}: {str(e)}")
            raise StorageError("Failed to store session", cause=e) from e

    def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            self.redis.delete(*[self._get_key(key) for key in keys])
        except RedisError as e:
            logger.error(f"Redis error clearing session: {str(e)}")
            raise StorageError("Failed to clear session", cause=e) from e


class FileSessionStorage(SessionStorageInterface):
    """Session storage in a JSON file readable only by the owner"""

    def __init__(self, path: Path = None):
        self.path = Path(path or settings.SESSION_FILE)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.error(f"Corrupted session file {self.path}")
            return {}
        except OSError as e:
            raise StorageError("Failed to read session", cause=e) from e
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        try:
            if not data:
                if self.path.exists():
                    self.path.unlink()
                return

            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".session-")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f)
                os.chmod(tmp_path, 0o600)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except OSError as e:
            raise StorageError("Failed to write session", cause=e) from e

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, *keys: str) -> None:
        data = self._read()
        for key in keys:
            data.pop(key, None)
        self._write(data)


class MemorySessionStorage(SessionStorageInterface):
    """Process-local storage, the session does not survive a restart"""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, *keys: str) -> None:
        for key in keys:
            self._data.pop(key, None)


def create_storage(backend: str = None) -> SessionStorageInterface:
    """Build the storage backend named in settings"""
    backend = (backend or settings.SESSION_BACKEND).lower()
    if backend == "redis":
        return RedisSessionStorage()
    if backend == "file":
        return FileSessionStorage()
    if backend == "memory":
        return MemorySessionStorage()
    raise ConfigurationException(f"Unknown session backend: {backend}", "validation")
