from datetime import datetime, timedelta, timezone
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.config import settings
from core.database import get_db
from core.errors import AuthenticationError, AuthorizationError
from models.users import User
from repository import user_repo

# HTTPBearer: Authorization 헤더에서 "Bearer <token>" 자동 추출
# auto_error=False: 토큰이 없을 때도 우리 쪽 AuthenticationError(401)로 통일
security_schema = HTTPBearer(auto_error=False)


def create_access_token(user: User) -> str:
    """
    세션 토큰 발급 (유효기간 14일)

    화면 표시용 정보를 함께 싣지만, 권한 판단은 항상 DB의 유저 레코드 기준
    """
    expire = datetime.now(timezone.utc) + timedelta(days=settings.session_expire_days)
    payload = {
        "sub": user.id,
        "exp": expire,
        "type": "access",
        "role": user.role,
        "username": user.username,
        "companyName": user.company_name,
        "businessNumber": user.business_number,
        "phone": user.phone,
        "address": user.address,
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


async def resolve_user(db: AsyncIOMotorDatabase, token: str | None) -> User:
    """세션 토큰 → 유저 레코드. 조금이라도 이상하면 AuthenticationError"""
    if not token:
        raise AuthenticationError("인증되지 않은 사용자입니다.")

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("토큰 검증에 실패했습니다.")

    user_id = payload.get("sub")
    if user_id is None or payload.get("type") != "access":
        raise AuthenticationError("유효하지 않은 접근 토큰입니다.")

    user = await user_repo.find_by_id(db, user_id)
    if not user:
        raise AuthenticationError("사용자를 찾을 수 없습니다.")
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security_schema),
    db: AsyncIOMotorDatabase = Depends(get_db),
) -> User:
    """Bearer 토큰을 검증하고 DB에서 User를 반환합니다."""
    token = credentials.credentials if credentials else None
    return await resolve_user(db, token)


async def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """차단되지 않은 사용자만 통과시킵니다."""
    if not current_user.is_active:
        raise AuthorizationError("차단된 계정입니다. 관리자에게 문의하세요.")
    return current_user


async def get_current_admin_user(current_user: User = Depends(get_current_active_user)) -> User:
    """관리자 권한이 있는 사용자만 통과시킵니다."""
    if not current_user.is_admin:
        raise AuthorizationError("관리자 권한이 필요합니다.")
    return current_user
