# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: users.py
# -----------------------------------------------------------------------------
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_user_service
from api.schemas.users import UserCreateRequest, UserResponse
from exceptions.AdvisorErrors import EntityNotFound
from services.UserService import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=201)
def register_user(
        req: UserCreateRequest,
        svc: UserService = Depends(get_user_service),
) -> UserResponse:
    logger.info("POST /users (start) first_name='%s' skills=%d", req.first_name, len(req.skills))
    try:
        out = svc.register_user(req.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("register_user failed: %s", e)
        raise HTTPException(status_code=500, detail=f"register user failed: {e}")

    logger.info("POST /users (done) user_id=%s", out["user_id"])
    return UserResponse(**out)


@router.get("", response_model=List[UserResponse])
def list_users(svc: UserService = Depends(get_user_service)) -> List[UserResponse]:
    return [UserResponse(**u) for u in svc.list_users()]


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
        user_id: int,
        svc: UserService = Depends(get_user_service),
) -> UserResponse:
    try:
        return UserResponse(**svc.get_user(user_id))
    except EntityNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
