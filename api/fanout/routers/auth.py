"""API key management (admin scope)."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from fanout.auth import KEY_PREFIX_LENGTH, generate_key, hash_key, require_scope
from fanout.database import get_db
from fanout.models.api_key import ApiKey
from fanout.response import paginated_response, single_response
from fanout.schemas.auth import ApiKeyCreate, ApiKeyCreated, ApiKeyResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"], dependencies=[Depends(require_scope("admin"))])


@router.post("/keys", status_code=201, summary="Create an API key")
async def create_key(body: ApiKeyCreate, db: AsyncSession = Depends(get_db)):
    raw_key = generate_key()
    db_key = ApiKey(
        name=body.name,
        key_hash=hash_key(raw_key),
        key_prefix=raw_key[:KEY_PREFIX_LENGTH],
        scopes=body.scopes,
    )
    db.add(db_key)
    await db.commit()
    await db.refresh(db_key)

    logger.info("Created API key %s (%s) with scopes %s", db_key.id, body.name, body.scopes)
    created = ApiKeyCreated(
        **ApiKeyResponse.model_validate(db_key).model_dump(), raw_key=raw_key
    )
    return single_response(created)


@router.get("/keys", summary="List API keys")
async def list_keys(
    limit: int = Query(50, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    total = (await db.execute(select(func.count()).select_from(ApiKey))).scalar()
    result = await db.execute(
        select(ApiKey).order_by(ApiKey.created_at.desc()).limit(limit).offset(offset)
    )
    items = [ApiKeyResponse.model_validate(k) for k in result.scalars().all()]
    return paginated_response(items, total, limit, offset)


@router.delete("/keys/{key_id}", status_code=204, summary="Revoke an API key")
async def revoke_key(key_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    db_key = await db.get(ApiKey, key_id)
    if not db_key:
        raise HTTPException(status_code=404, detail="API key not found")
    db_key.is_active = False
    await db.commit()
    logger.info("Revoked API key %s", key_id)
