"""
Store module.
Thin wrapper over a redis-py client exposing only the operations the index needs.
Every redis failure is re-raised as PersistenceError carrying the operation and key.
"""

from datetime import timedelta  # snapshot expiry
from typing import Dict, List, Optional, Union  # type hints

import redis  # store client

from loguru import logger  # console logger


class PersistenceError(Exception):
	"""A single store operation failed."""

	def __init__(self, operation: str, key: str, cause: Exception):
		super().__init__(f"{operation} {key} failed: {cause}")
		self.operation = operation
		self.key = key
		self.cause = cause


class RedisStore:
	"""
	Key-value, sorted-set and hash primitives over an injected redis client.
	The client should be created with decode_responses=True so reads come back as str.
	"""

	def __init__(self, client: redis.Redis):
		self.client = client

	@classmethod
	def from_url(cls, url: str) -> "RedisStore":
		logger.info(f"[Store] Connecting to {url}")
		return cls(redis.Redis.from_url(url, decode_responses=True, socket_connect_timeout=2))

	def _call(self, operation: str, key: str, fn, *args, **kwargs):
		try:
			return fn(*args, **kwargs)
		except redis.RedisError as e:
			raise PersistenceError(operation, key, e) from e

	def get(self, key: str) -> Optional[str]:
		return self._call("GET", key, self.client.get, key)

	def set(self, key: str, value: Union[str, bytes], ttl: Optional[timedelta] = None) -> None:
		self._call("SET", key, self.client.set, key, value, ex=ttl)

	def zadd(self, key: str, score: float, member: str) -> None:
		self._call("ZADD", key, self.client.zadd, key, {member: score})

	def zrange(self, key: str, start: int = 0, stop: int = -1) -> List[str]:
		return self._call("ZRANGE", key, self.client.zrange, key, start, stop)

	def hgetall(self, key: str) -> Dict[str, str]:
		return self._call("HGETALL", key, self.client.hgetall, key)

	def hmset(self, key: str, mapping: Dict[str, str]) -> None:
		# HMSET is deprecated server-side; HSET with a mapping has the same effect
		self._call("HMSET", key, self.client.hset, key, mapping=mapping)

	def keys(self, pattern: str) -> List[str]:
		return self._call("KEYS", pattern, self.client.keys, pattern)

	def ping(self) -> bool:
		return bool(self._call("PING", "", self.client.ping))
