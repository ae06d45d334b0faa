from motor.motor_asyncio import AsyncIOMotorDatabase

from core.errors import AuthorizationError, NotFoundError
from core.logger import get_logger
from models.cart import CartItem
from models.users import User
from repository import cart_repo, order_repo, product_repo
from schemas.cart import CartItemCreate

logger = get_logger("cart")


async def purge_consumed(db: AsyncIOMotorDatabase, user_id: str) -> int:
    """
    이미 주문으로 저장된 예약의 항목 정리

    주문 저장 후 항목 삭제가 실패하면 항목은 그 주문의 예약 토큰을 단 채 남는다.
    예약이 오래되어도 다시 예약되지 않도록 주문 완료/조회 전에 지운다.
    """
    tokens = await cart_repo.find_reservation_tokens(db, user_id)
    consumed = await order_repo.find_consumed_tokens(db, tokens)
    if not consumed:
        return 0

    deleted = await cart_repo.delete_by_tokens(db, user_id, consumed)
    logger.info("주문된 장바구니 항목 정리", extra={"extra_data": {
        "user_id": user_id, "tokens": consumed, "deleted": deleted,
    }})
    return deleted


async def get_cart_items(db: AsyncIOMotorDatabase, user_id: str) -> list[CartItem]:
    """내 장바구니 (최신순)"""
    await purge_consumed(db, user_id)
    return await cart_repo.find_by_user_id(db, user_id)


async def add_to_cart(db: AsyncIOMotorDatabase, user: User, data: CartItemCreate) -> CartItem:
    """
    장바구니 담기: 같은 제품이어도 항상 새 항목으로 추가

    일반 사용자는 허용된 제품(product_ids)만 담을 수 있음
    """
    product = await product_repo.find_by_id(db, data.product_id)
    if not product:
        raise NotFoundError("제품을 찾을 수 없습니다.")

    if not user.is_admin and product.id not in user.product_ids:
        raise AuthorizationError("주문할 수 없는 제품입니다.")

    item = CartItem(
        user_id=user.id,
        product_id=product.id,
        name=data.name or product.name,
        quantity=data.quantity,
        regist_date=data.regist_date or product.regist_date,
        note=data.note,
    )
    await cart_repo.create(db, item)
    logger.info("장바구니 추가", extra={"extra_data": {
        "user_id": user.id, "cart_item_id": item.id, "product_id": product.id, "quantity": item.quantity,
    }})
    return item


async def _get_owned_item(db: AsyncIOMotorDatabase, user_id: str, item_id: str) -> CartItem:
    """항목 존재(404)와 소유권(403)을 구분해서 확인"""
    item = await cart_repo.find_by_id(db, item_id)
    if not item:
        raise NotFoundError("장바구니 항목을 찾을 수 없습니다.")
    if item.user_id != user_id:
        raise AuthorizationError("이 장바구니 항목에 대한 권한이 없습니다.")
    return item


async def remove_from_cart(db: AsyncIOMotorDatabase, user_id: str, item_id: str) -> None:
    """장바구니 항목 삭제 (본인 것만)"""
    await _get_owned_item(db, user_id, item_id)
    if not await cart_repo.delete(db, item_id, user_id):
        raise NotFoundError("장바구니 항목을 찾을 수 없습니다.")


async def update_cart_item_note(db: AsyncIOMotorDatabase, user_id: str, item_id: str, note: str) -> CartItem:
    """장바구니 항목 메모 수정 (본인 것만)"""
    await _get_owned_item(db, user_id, item_id)
    if not await cart_repo.update_note(db, item_id, user_id, note):
        raise NotFoundError("장바구니 항목을 찾을 수 없습니다.")
    return await cart_repo.find_by_id_and_user(db, item_id, user_id)
