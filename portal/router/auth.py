from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.database import get_db
from core.security import create_access_token, get_current_active_user
from models.users import User
from schemas.auth import UserResponse, Token
from service.auth_service import authenticate_user

router = APIRouter()


@router.post("/login", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """아이디/비밀번호를 확인하고 세션 토큰(14일)을 반환합니다."""
    # 실패(401)와 차단 계정(403)은 service에서 예외로 처리
    user = await authenticate_user(db, form_data.username, form_data.password)
    return Token(access_token=create_access_token(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_active_user)):
    """현재 로그인한 사용자 정보"""
    return UserResponse.model_validate(current_user)
