from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError
from redis.asyncio import Redis

from core.errors import ConflictError, NotFoundError, StateError
from core.logger import get_logger
from models.users import User
from repository import user_repo
from schemas.user import UserCreate, UserUpdate
from service.auth_service import get_password_hash
from service.lock_service import admin_lock

logger = get_logger("user")

DUPLICATE_USERNAME_MESSAGE = "이미 사용 중인 계정 아이디입니다."
LAST_ADMIN_MESSAGE = "마지막 관리자 계정은 삭제하거나 일반 사용자로 바꿀 수 없습니다."

# UserUpdate 필드 → 저장 필드명
_UPDATABLE_FIELDS = {
    "username": "username",
    "name": "name",
    "company_name": "companyName",
    "business_number": "businessNumber",
    "phone": "phone",
    "address": "address",
    "product_ids": "productIds",
    "status": "status",
    "role": "role",
}


async def get_users(db: AsyncIOMotorDatabase) -> list[User]:
    return await user_repo.find_all(db)


async def get_user(db: AsyncIOMotorDatabase, user_id: str) -> User:
    user = await user_repo.find_by_id(db, user_id)
    if not user:
        raise NotFoundError("사용자를 찾을 수 없습니다.")
    return user


async def create_user(db: AsyncIOMotorDatabase, user_in: UserCreate) -> User:
    """계정 추가 (아이디 중복 확인 후 비밀번호 해싱해서 저장)"""
    if await user_repo.find_by_username(db, user_in.username):
        raise ConflictError(DUPLICATE_USERNAME_MESSAGE)

    user = User(
        username=user_in.username,
        password_hash=get_password_hash(user_in.password),
        name=user_in.name,
        company_name=user_in.company_name,
        business_number=user_in.business_number,
        phone=user_in.phone,
        address=user_in.address,
        product_ids=list(dict.fromkeys(user_in.product_ids)),
        status=user_in.status,
        role=user_in.role,
    )
    try:
        await user_repo.create(db, user)
    except DuplicateKeyError:
        # 중복 확인과 저장 사이에 같은 아이디가 먼저 저장된 경우
        raise ConflictError(DUPLICATE_USERNAME_MESSAGE)
    logger.info("계정 추가", extra={"extra_data": {"user_id": user.id, "role": user.role}})
    return user


async def update_user(db: AsyncIOMotorDatabase, redis: Redis, user_id: str, user_in: UserUpdate) -> User:
    """
    계정 수정

    - 아이디 중복 검사는 자기 자신 제외
    - 비밀번호는 값이 있을 때만 재해싱
    - 마지막 관리자를 user로 내리는 것은 거부 (역할 변경은 lock:admins 안에서)
    """
    if user_in.role is None:
        return await _update_user(db, user_id, user_in)
    async with admin_lock(redis):
        return await _update_user(db, user_id, user_in)


async def _update_user(db: AsyncIOMotorDatabase, user_id: str, user_in: UserUpdate) -> User:
    current = await get_user(db, user_id)

    if user_in.username and await user_repo.find_by_username(db, user_in.username, exclude_id=user_id):
        raise ConflictError(DUPLICATE_USERNAME_MESSAGE)

    if current.is_admin and user_in.role == "user" and await user_repo.count_admins(db) <= 1:
        raise StateError(LAST_ADMIN_MESSAGE)

    fields = {}
    for attr, stored in _UPDATABLE_FIELDS.items():
        value = getattr(user_in, attr)
        if value is not None:
            fields[stored] = value
    if "productIds" in fields:
        fields["productIds"] = list(dict.fromkeys(fields["productIds"]))
    if user_in.password:
        fields["password"] = get_password_hash(user_in.password)

    try:
        updated = await user_repo.update(db, user_id, fields)
    except DuplicateKeyError:
        raise ConflictError(DUPLICATE_USERNAME_MESSAGE)
    if not updated:
        raise NotFoundError("사용자를 찾을 수 없습니다.")
    return await get_user(db, user_id)


async def delete_user(db: AsyncIOMotorDatabase, redis: Redis, user_id: str) -> None:
    """계정 삭제: 관리자가 1명뿐이면 그 관리자는 삭제 불가"""
    async with admin_lock(redis):
        user = await get_user(db, user_id)

        if user.is_admin and await user_repo.count_admins(db) <= 1:
            raise StateError(LAST_ADMIN_MESSAGE)

        if not await user_repo.delete(db, user_id):
            raise NotFoundError("사용자를 찾을 수 없습니다.")
    logger.info("계정 삭제", extra={"extra_data": {"user_id": user_id}})


async def get_entitled_product_ids(db: AsyncIOMotorDatabase, user_id: str) -> list[str]:
    user = await get_user(db, user_id)
    return user.product_ids
