from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis
from typing import List

from core.database import get_db
from core.dependencies import get_redis
from core.security import get_current_admin_user
from models.users import User
from schemas.auth import UserResponse
from schemas.user import UserCreate, UserUpdate, EntitlementResponse
from service import user_service

# 계정 관리는 전부 관리자 전용
router = APIRouter()


@router.get("/", response_model=List[UserResponse])
async def list_users(
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """계정 목록 (비밀번호 제외)"""
    return [UserResponse.model_validate(u) for u in await user_service.get_users(db)]


@router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """계정 추가 (아이디 중복 시 409)"""
    return UserResponse.model_validate(await user_service.create_user(db, user_in))


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    return UserResponse.model_validate(await user_service.get_user(db, user_id))


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: str,
    user_in: UserUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """계정 수정 (비밀번호는 입력한 경우에만 변경)"""
    return UserResponse.model_validate(await user_service.update_user(db, redis, user_id, user_in))


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """계정 삭제 (마지막 관리자는 409)"""
    await user_service.delete_user(db, redis, user_id)


@router.get("/{user_id}/products", response_model=EntitlementResponse)
async def get_entitled_products(
    user_id: str,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """계정에 허용된 제품 ID 목록"""
    product_ids = await user_service.get_entitled_product_ids(db, user_id)
    return EntitlementResponse(user_id=user_id, product_ids=product_ids)
