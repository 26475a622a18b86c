"""Profile endpoints for the authenticated user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Header, Request
from fastapi.responses import JSONResponse

from lib.config import get_settings
from lib.errors import ProfileNotFoundError, ProfileValidationError
from lib.models import ProfileUpdateResponse, UserProfileResponse
from lib.profile_store import decode_update_body, get_profile, update_profile, validate_profile_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


def current_user_id(authorization: str = Header(...)) -> str:
    """Extract the user ID from a 'Bearer <user_id>' header."""
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header")
    user_id = authorization[7:].strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user identifier")
    return user_id


def _server_error() -> JSONResponse:
    return JSONResponse(status_code=500, content={"message": "Server error"})


def _missing_profile(user_id: str) -> JSONResponse:
    if get_settings().conceal_missing_profile:
        logger.error("No user record for %s", user_id)
        return _server_error()
    return JSONResponse(status_code=404, content={"message": "Profile not found"})


@router.get("", response_model=UserProfileResponse)
async def read_profile(user_id: str = Depends(current_user_id)):
    """Get the current user's profile, without the password."""
    try:
        return await get_profile(user_id)
    except ProfileNotFoundError:
        return _missing_profile(user_id)
    except Exception:
        logger.exception("Get profile error")
        return _server_error()


@router.put("", response_model=ProfileUpdateResponse)
async def write_profile(
    request: Request,
    user_id: str = Depends(current_user_id),
):
    """Partially update the current user's profile.

    Only the fields present in the body are changed; ``profile`` sub-fields
    that are not mentioned keep their stored values.
    """
    try:
        update = validate_profile_update(decode_update_body(await request.body()))
    except ProfileValidationError as exc:
        return JSONResponse(status_code=400, content={"errors": exc.errors})

    try:
        user = await update_profile(user_id, update)
    except ProfileNotFoundError:
        return _missing_profile(user_id)
    except Exception:
        logger.exception("Update profile error")
        return _server_error()

    return {"message": "Profile updated successfully", "user": user}
