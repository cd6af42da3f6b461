"""API key authentication for the integration management routes."""

import logging
import secrets
from datetime import datetime, timezone

from fastapi import Depends, HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from passlib.hash import pbkdf2_sha256
from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from fanout.config import settings
from fanout.database import get_db
from fanout.models.api_key import ApiKey
from fanout.redis import redis as redis_client

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

ALL_SCOPES = ["integrations", "admin"]

KEY_PREFIX_LENGTH = 12


def client_ip(request: Request) -> str:
    cf_ip = request.headers.get("CF-Connecting-IP")
    if cf_ip:
        return cf_ip
    xff = request.headers.get("X-Forwarded-For")
    if xff:
        return xff.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class FailedAttempts:
    """
    Per-IP failed authentication counter kept in Redis.

    Locks an IP out after THRESHOLD failures inside WINDOW seconds.
    Redis being down never blocks authentication.
    """

    THRESHOLD = 10
    WINDOW = 300

    def __init__(self, ip: str):
        self.ip = ip
        self.key = f"auth_fail:{ip}"

    async def is_locked_out(self) -> bool:
        try:
            count = await redis_client.get(self.key)
        except Exception:
            logger.debug("Redis unavailable, skipping lockout check")
            return False
        return bool(count) and int(count) >= self.THRESHOLD

    async def record(self) -> None:
        try:
            count = await redis_client.incr(self.key)
            if count == 1:
                await redis_client.expire(self.key, self.WINDOW)
        except Exception:
            logger.debug("Redis unavailable, failed attempt not recorded")

    async def clear(self) -> None:
        try:
            await redis_client.delete(self.key)
        except Exception:
            logger.debug("Redis unavailable, failed attempts not cleared")


def hash_key(key: str) -> str:
    return pbkdf2_sha256.hash(key)


def verify_key(key: str, key_hash: str) -> bool:
    return pbkdf2_sha256.verify(key, key_hash)


def generate_key() -> str:
    return f"fo_{secrets.token_urlsafe(32)}"


async def get_current_key(
    request: Request,
    api_key: str = Security(api_key_header),
    db: AsyncSession = Depends(get_db),
) -> ApiKey:
    if not api_key:
        raise HTTPException(status_code=401, detail="Missing API key")

    attempts = FailedAttempts(client_ip(request))
    if await attempts.is_locked_out():
        raise HTTPException(
            status_code=429,
            detail="Too many failed authentication attempts. Try again later.",
        )

    # Static admin key (constant-time comparison)
    if secrets.compare_digest(api_key, settings.admin_api_key):
        await attempts.clear()
        return ApiKey(name="admin", key_hash="", scopes=ALL_SCOPES, is_active=True)

    key_prefix = api_key[:KEY_PREFIX_LENGTH]
    result = await db.execute(
        select(ApiKey).where(
            ApiKey.is_active.is_(True),
            or_(ApiKey.key_prefix == key_prefix, ApiKey.key_prefix.is_(None)),
        )
    )

    for db_key in result.scalars().all():
        if not verify_key(api_key, db_key.key_hash):
            continue
        await attempts.clear()
        values = {"last_used_at": datetime.now(timezone.utc)}
        if not db_key.key_prefix:
            values["key_prefix"] = key_prefix
        await db.execute(update(ApiKey).where(ApiKey.id == db_key.id).values(**values))
        await db.commit()
        return db_key

    await attempts.record()
    logger.warning("Failed auth attempt from %s", attempts.ip)
    raise HTTPException(status_code=401, detail="Invalid API key")


def require_scope(scope: str):
    async def checker(key: ApiKey = Depends(get_current_key)):
        if "admin" in key.scopes or scope in key.scopes:
            return key
        raise HTTPException(status_code=403, detail=f"Key lacks required scope: {scope}")

    return checker
