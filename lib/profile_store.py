"""User record reads and partial profile updates against Postgres.

Updates are read-merge-write: the current ``profile`` document is loaded under
a row lock, only the supplied sub-fields are overlaid, and the updated row is
returned from the same transaction. Concurrent updates for one user are also
queued on an in-process lock so they never race for the row lock.
"""

import asyncio
import json
import logging
import weakref
from typing import Any, Mapping, Optional

from pydantic import ValidationError

from lib.database import get_pool
from lib.errors import ProfileNotFoundError, ProfileValidationError, StoreUnavailableError
from lib.models import ProfileFields, ProfileUpdateRequest

logger = logging.getLogger(__name__)

# Columns stored on the user row that never leave the server
SENSITIVE_FIELDS = ("password",)

# user_id → lock held for the duration of one update
_update_locks: "weakref.WeakValueDictionary[str, asyncio.Lock]" = weakref.WeakValueDictionary()


def _lock_for(user_id: str) -> asyncio.Lock:
    lock = _update_locks.get(user_id)
    if lock is None:
        lock = asyncio.Lock()
        _update_locks[user_id] = lock
    return lock


def _require_pool():
    pool = get_pool()
    if pool is None:
        raise StoreUnavailableError("Database not available")
    return pool


def _decode_profile(raw: Any) -> dict:
    # asyncpg hands JSONB back as text unless a codec is registered
    if raw is None:
        return {}
    if isinstance(raw, str):
        return json.loads(raw)
    return dict(raw)


def sanitize_user(record: Mapping[str, Any]) -> dict:
    """Copy a user row without its sensitive columns."""
    user = dict(record)
    for key in SENSITIVE_FIELDS:
        user.pop(key, None)
    user["profile"] = _decode_profile(user.get("profile"))
    return user


def merge_profile(current: Mapping[str, Any], update: Optional[ProfileFields]) -> dict:
    """Overlay the supplied profile sub-fields onto the current document.

    Keys the update does not mention, including ones outside the recognised
    sub-fields, keep their current values.
    """
    merged = dict(current)
    if update is not None:
        merged.update(update.supplied())
    return merged


def _field_error(error: dict) -> dict:
    return {
        "type": "field",
        "path": ".".join(str(part) for part in error["loc"]),
        "msg": error["msg"],
        "value": error.get("input"),
        "location": "body",
    }


def decode_update_body(raw: bytes) -> Any:
    """Decode a raw request body; an empty body means no fields supplied."""
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise ProfileValidationError([{
            "type": "field",
            "path": "",
            "msg": "Invalid JSON body",
            "value": None,
            "location": "body",
        }]) from exc


def validate_profile_update(payload: Any) -> ProfileUpdateRequest:
    """Parse an update body, collecting every invalid field at once."""
    try:
        return ProfileUpdateRequest.model_validate({} if payload is None else payload)
    except ValidationError as exc:
        raise ProfileValidationError([_field_error(err) for err in exc.errors()]) from exc


async def get_profile(user_id: str) -> dict:
    """Load the sanitized user record for ``user_id``."""
    pool = _require_pool()

    async with pool.acquire() as conn:
        row = await conn.fetchrow("SELECT * FROM users WHERE id = $1", user_id)

    if row is None:
        raise ProfileNotFoundError(user_id)
    return sanitize_user(row)


async def update_profile(user_id: str, update: ProfileUpdateRequest) -> dict:
    """Apply a validated partial update and return the sanitized result."""
    pool = _require_pool()

    async with _lock_for(user_id):
        async with pool.acquire() as conn:
            async with conn.transaction():
                row = await conn.fetchrow(
                    "SELECT * FROM users WHERE id = $1 FOR UPDATE",
                    user_id,
                )
                if row is None:
                    raise ProfileNotFoundError(user_id)

                if update.is_empty():
                    return sanitize_user(row)

                profile = merge_profile(_decode_profile(row["profile"]), update.profile)
                row = await conn.fetchrow(
                    """
                    UPDATE users SET
                        name = COALESCE($2, name),
                        profile = $3::jsonb,
                        updated_at = NOW()
                    WHERE id = $1
                    RETURNING *
                    """,
                    user_id,
                    update.name,
                    json.dumps(profile),
                )

    logger.info("Updated profile for user %s", user_id)
    return sanitize_user(row)
