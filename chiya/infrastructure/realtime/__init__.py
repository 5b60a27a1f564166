"""Change feed implementations"""

from .memory_feed import InMemoryChangeFeed
from .redis_feed import RedisChangeFeed

__all__ = ["InMemoryChangeFeed", "RedisChangeFeed"]
