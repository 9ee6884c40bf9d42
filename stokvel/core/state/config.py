"""Redis configuration for durable session storage"""
import redis
from urllib.parse import urlparse

from stokvel.config import settings


class RedisConfig:
    """Redis connection settings for session storage"""

    def __init__(self, url: str = None):
        parsed = urlparse(url or settings.REDIS_URL)

        # Basic settings
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or 6379
        self.password = parsed.password
        path = (parsed.path or "").lstrip("/")
        self.db = int(path) if path.isdigit() else 0

        # Connection settings
        self.connection_settings = {
            "socket_timeout": 5,
            "socket_connect_timeout": 5,
            "retry_on_timeout": True,
            "health_check_interval": 30,
            "decode_responses": True,
            "encoding": "utf-8"
        }

    def get_client(self) -> redis.Redis:
        """Get Redis client instance"""
        return redis.Redis(
            host=self.host,
            port=self.port,
            password=self.password,
            db=self.db,
            **self.connection_settings
        )
