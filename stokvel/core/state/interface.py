"""Durable session storage interface

Storage holds exactly two keys, ``token`` and ``user``, both as strings.
"""

from abc import ABC, abstractmethod
from typing import Optional

TOKEN_KEY = "token"
USER_KEY = "user"


class SessionStorageInterface(ABC):
    """Interface defining durable key/value operations for the session"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Get stored value

        Args:
            key: Storage key

        Returns:
            Stored string or None when absent
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key"""
        pass

    @abstractmethod
    def delete(self, *keys: str) -> None:
        """Remove keys, ignoring ones that are absent"""
        pass
