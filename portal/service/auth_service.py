import bcrypt
from motor.motor_asyncio import AsyncIOMotorDatabase

from core.errors import AuthenticationError, AuthorizationError
from core.logger import get_logger
from models.users import User
from repository import user_repo

logger = get_logger("auth")


def get_password_hash(password: str) -> str:
    """비밀번호 평문을 bcrypt로 해싱"""
    # bcrypt는 72바이트 초과 비밀번호를 허용하지 않음: 스키마에서 길이 제한
    salt = bcrypt.gensalt()
    hashed_password = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed_password.decode('utf-8')


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """입력받은 평문과 DB의 해시가 일치하는지 검증"""
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except ValueError:
        return False


async def authenticate_user(db: AsyncIOMotorDatabase, username: str, password: str) -> User:
    """
    로그인 검증

    - 아이디 없음 / 비밀번호 불일치 → 401 (어느 쪽인지 알려주지 않음)
    - 차단 계정 → 403, 별도 메시지
    - 성공 시 lastLogin 갱신
    """
    user = await user_repo.find_by_username(db, username)
    if not user or not verify_password(password, user.password_hash):
        logger.info("로그인 실패", extra={"extra_data": {"username": username}})
        raise AuthenticationError("아이디 또는 비밀번호가 올바르지 않습니다.")

    if not user.is_active:
        logger.info("차단 계정 로그인 시도", extra={"extra_data": {"user_id": user.id}})
        raise AuthorizationError("차단된 계정입니다. 관리자에게 문의하세요.")

    await user_repo.touch_last_login(db, user.id)
    return user
