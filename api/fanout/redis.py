"""Shared async Redis client (auth lockout counters)."""

from redis.asyncio import Redis

from fanout.config import settings

redis = Redis.from_url(settings.redis_url, decode_responses=True)
