from .config import RedisConfig
from .interface import TOKEN_KEY, USER_KEY, SessionStorageInterface
from .session import SessionManager, SessionState
from .storage import (FileSessionStorage, MemorySessionStorage,
                      RedisSessionStorage, create_storage)

__all__ = [
    'SessionManager',
    'SessionState',
    'SessionStorageInterface',
    'RedisSessionStorage',
    'FileSessionStorage',
    'MemorySessionStorage',
    'RedisConfig',
    'create_storage',
    'TOKEN_KEY',
    'USER_KEY',
]
