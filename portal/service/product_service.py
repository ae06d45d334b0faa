from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from core.errors import ConflictError, NotFoundError, StateError
from core.logger import get_logger
from models.base import today
from models.product import Product
from models.users import User
from repository import order_repo, product_repo, user_repo
from schemas.product import ProductCreate, ProductUpdate

logger = get_logger("product")

DUPLICATE_CODE_MESSAGE = "이미 존재하는 제품 코드입니다."


async def get_products(db: AsyncIOMotorDatabase) -> list[Product]:
    return await product_repo.find_all(db)


async def get_available_products(db: AsyncIOMotorDatabase, user: User) -> list[Product]:
    """주문 화면용 카탈로그: 관리자는 전체, 일반 사용자는 허용된 제품만"""
    if user.is_admin:
        return await product_repo.find_all(db)
    if not user.product_ids:
        return []
    return await product_repo.find_by_ids(db, user.product_ids)


async def get_product(db: AsyncIOMotorDatabase, product_id: str) -> Product:
    product = await product_repo.find_by_id(db, product_id)
    if not product:
        raise NotFoundError("제품을 찾을 수 없습니다.")
    return product


async def create_product(db: AsyncIOMotorDatabase, data: ProductCreate) -> Product:
    if await product_repo.find_by_code(db, data.code):
        raise ConflictError(DUPLICATE_CODE_MESSAGE)

    product = Product(
        name=data.name,
        code=data.code,
        regist_date=data.regist_date or today(),
    )
    try:
        await product_repo.create(db, product)
    except DuplicateKeyError:
        # 중복 확인과 저장 사이에 같은 코드가 먼저 저장된 경우
        raise ConflictError(DUPLICATE_CODE_MESSAGE)
    logger.info("제품 추가", extra={"extra_data": {"product_id": product.id, "code": product.code}})
    return product


async def update_product(db: AsyncIOMotorDatabase, product_id: str, data: ProductUpdate) -> Product:
    """부분 수정: 코드 중복 검사는 자기 자신 제외"""
    if data.code and await product_repo.find_by_code(db, data.code, exclude_id=product_id):
        raise ConflictError(DUPLICATE_CODE_MESSAGE)

    fields = {}
    if data.name is not None:
        fields["name"] = data.name
    if data.code is not None:
        fields["code"] = data.code
    if data.regist_date is not None:
        fields["registDate"] = data.regist_date

    try:
        updated = await product_repo.update(db, product_id, fields)
    except DuplicateKeyError:
        raise ConflictError(DUPLICATE_CODE_MESSAGE)
    if not updated:
        raise NotFoundError("제품을 찾을 수 없습니다.")
    return await get_product(db, product_id)


async def delete_product(db: AsyncIOMotorDatabase, product_id: str) -> None:
    """
    주문 라인에서 참조 중인 제품은 삭제 거부
    삭제되면 모든 계정의 허용 제품 목록에서도 제거
    """
    if not await product_repo.find_by_id(db, product_id):
        raise NotFoundError("제품을 찾을 수 없습니다.")

    if await order_repo.exists_with_product(db, product_id):
        raise StateError("이 제품이 포함된 주문이 있어 삭제할 수 없습니다.")

    if not await product_repo.delete(db, product_id):
        raise NotFoundError("제품을 찾을 수 없습니다.")
    pulled = await user_repo.pull_product_id(db, product_id)
    logger.info("제품 삭제", extra={"extra_data": {"product_id": product_id, "entitlements_removed": pulled}})
