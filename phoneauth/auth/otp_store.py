"""
OTP Store
Key/value storage with expiry for pending OTPs and verification markers
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Tuple
import logging

import redis

logger = logging.getLogger(__name__)


class OTPStore(ABC):
    """
    Storage backend for OTP data.
    Values are JSON-serializable dicts; ttl_seconds is housekeeping only.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Dict[str, Any]]:
        """Return the value for key, or None if absent or expired"""
        pass

    @abstractmethod
    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        """Store value under key, replacing any existing value"""
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present"""
        pass


class MemoryOTPStore(OTPStore):
    """
    Process-local store. Lost on restart and not shared between instances;
    use RedisOTPStore when running more than one worker.
    """

    def __init__(self, prune_interval_seconds: float = 60.0):
        self._entries: Dict[str, Tuple[Dict[str, Any], float]] = {}
        self.prune_interval_seconds = prune_interval_seconds
        self._last_prune = time.monotonic()

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if time.monotonic() >= expires_at:
            self._entries.pop(key, None)
            return None
        return dict(value)

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        now = time.monotonic()
        if now - self._last_prune >= self.prune_interval_seconds:
            self._prune(now)
        self._entries[key] = (dict(value), now + ttl_seconds)

    def _prune(self, now: float) -> None:
        """Drop expired entries for keys that are never read again"""
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            self._entries.pop(key, None)
        self._last_prune = now
        if expired:
            logger.debug(f"Pruned {len(expired)} expired OTP store entries")

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)


class RedisOTPStore(OTPStore):
    """Shared store backed by Redis, for multi-instance deployments"""

    def __init__(self, client: redis.Redis, prefix: str = "phoneauth:"):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "RedisOTPStore":
        client = redis.Redis.from_url(url, decode_responses=True)
        return cls(client, **kwargs)

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self.client.get(self._key(key))
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Dict[str, Any], ttl_seconds: int) -> None:
        self.client.set(self._key(key), json.dumps(value), ex=max(int(ttl_seconds), 1))

    def delete(self, key: str) -> None:
        self.client.delete(self._key(key))


def build_otp_store(settings) -> OTPStore:
    """Redis when REDIS_URL is configured, otherwise in-process memory"""
    if settings.REDIS_URL:
        logger.info("Using Redis OTP store")
        return RedisOTPStore.from_url(settings.REDIS_URL)

    logger.info("Using in-memory OTP store")
    return MemoryOTPStore()
