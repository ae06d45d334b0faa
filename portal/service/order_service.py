import uuid
from datetime import datetime, timedelta, timezone
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from redis.asyncio import Redis

from core.config import settings
from core.errors import AuthorizationError, NotFoundError, StateError, ValidationError
from core.logger import get_logger
from models.order import ORDER_COMPLETE, ORDER_PENDING, Order, OrderItem, OrderStatus
from models.users import User
from repository import cart_repo, order_repo, user_repo
from schemas.order import OrderCreate, OrderUpdate
from service.cart_service import purge_consumed
from service.lock_service import checkout_lock
from service.notification_service import send_order_completion_email

logger = get_logger("order")

MAX_RECENT = 100


def _owner_filter(user: User) -> str | None:
    # 관리자는 전체(None), 일반 사용자는 본인 주문만
    return None if user.is_admin else user.id


async def _find_visible(db: AsyncIOMotorDatabase, order_id: str, user: User) -> Order:
    """없으면 404, 남의 주문이면 403: 두 경우를 섞지 않음"""
    order = await order_repo.find_by_id(db, order_id)
    if not order:
        raise NotFoundError("주문을 찾을 수 없습니다.")
    if not user.is_admin and order.customer_id != user.id:
        raise AuthorizationError("이 주문에 접근할 권한이 없습니다.")
    return order


async def notify_completed(orders: list[Order], recipient: str | None = None) -> dict:
    """완료 메일 발송 (best effort): 실패는 로그 + 결과로만 알림"""
    result = await send_order_completion_email(orders, recipient)
    if "error" in result:
        logger.warning("주문 완료 알림 실패", extra={"extra_data": {
            "order_ids": [o.id for o in orders], "error": result["error"],
        }})
    return result


# === 조회 ===

async def get_orders(db: AsyncIOMotorDatabase, user: User) -> list[Order]:
    """주문 목록 (최신순): 관리자 전체, 일반 사용자 본인 것"""
    return await order_repo.find_all(db, customer_id=_owner_filter(user))


async def get_recent_orders(db: AsyncIOMotorDatabase, user: User, limit: int = 5) -> list[Order]:
    """요약 화면용 최근 주문"""
    limit = max(1, min(limit, MAX_RECENT))
    return await order_repo.find_all(db, customer_id=_owner_filter(user), limit=limit)


async def get_order(db: AsyncIOMotorDatabase, order_id: str, user: User) -> Order:
    return await _find_visible(db, order_id, user)


# === 생성 ===

async def create_order(db: AsyncIOMotorDatabase, user: User, data: OrderCreate) -> tuple[Order, dict | None]:
    """
    직접 주문 생성

    - 관리자: customer_id로 다른 거래처 주문 입력 가능, 상태 지정 가능
    - 일반 사용자: 항상 본인 주문, 대기 상태
    - 완료 상태로 만들면 완료 메일 발송 결과를 함께 반환
    """
    if not data.items:
        raise ValidationError("주문 항목이 없습니다.")

    customer = user
    status: OrderStatus = ORDER_PENDING
    if user.is_admin:
        status = data.status
        if data.customer_id and data.customer_id != user.id:
            customer = await user_repo.find_by_id(db, data.customer_id)
            if not customer:
                raise NotFoundError("주문 고객을 찾을 수 없습니다.")

    order = Order(
        status=status,
        customer_id=customer.id,
        customer_name=(data.customer_name if user.is_admin and data.customer_name else customer.name),
        company_name=customer.company_name,
        items=[OrderItem(**item.model_dump()) for item in data.items],
        note=data.note,
    )
    await order_repo.create(db, order)
    logger.info("주문 생성", extra={"extra_data": {
        "order_id": order.id, "customer_id": order.customer_id, "status": order.status, "created_by": user.id,
    }})

    notification = await notify_completed([order]) if order.is_complete else None
    return order, notification


async def checkout(
    db: AsyncIOMotorDatabase,
    redis: Redis,
    user: User,
    cart_item_ids: list[str],
    note: str | None = None,
    idempotency_key: str | None = None,
) -> tuple[Order, dict | None]:
    """
    선택한 장바구니 항목 → 완료 주문

    1. 멱등 키로 이미 만든 주문이 있으면 그대로 반환 (메일 재발송 없음, 알림 결과 None)
    2. 유저별 락 획득 (동시 요청은 409)
    3. 본인 소유 + 미예약 항목만 예약 토큰으로 표시
    4. 예약된 항목이 없으면 StateError (빈 주문 생성 안 함)
    5. 스냅샷으로 주문 저장 (예약 토큰 기록): 저장되지 않았으면 예약 해제 후 예외 전파
    6. 예약된 항목만 삭제: 실패해도 주문은 유지, 남은 항목은 다음 조회/주문 때 정리
    7. 완료 메일 (실패해도 주문은 유지)
    """
    if idempotency_key:
        existing = await order_repo.find_by_checkout_key(db, user.id, idempotency_key)
        if existing:
            logger.info("중복 주문 완료 요청: 기존 주문 반환", extra={"extra_data": {
                "order_id": existing.id, "user_id": user.id,
            }})
            return existing, None

    item_ids = list(dict.fromkeys(cart_item_ids))
    if not item_ids:
        raise StateError("선택된 장바구니 항목이 없습니다.")

    async with checkout_lock(redis, user.id):
        if idempotency_key:
            # 락 안에서 한 번 더 확인
            existing = await order_repo.find_by_checkout_key(db, user.id, idempotency_key)
            if existing:
                return existing, None

        token = uuid.uuid4().hex
        stale_before = (
            datetime.now(timezone.utc) - timedelta(seconds=settings.reservation_ttl_seconds)
        ).isoformat(timespec="milliseconds")

        # 이전 주문 완료에서 삭제가 실패한 항목은 예약 전에 먼저 정리
        await purge_consumed(db, user.id)
        await cart_repo.reserve(db, user.id, item_ids, token, stale_before)
        cart_items = await cart_repo.find_reserved(db, token)
        if not cart_items:
            raise StateError("선택된 장바구니 항목이 없습니다.")

        order = Order(
            status=ORDER_COMPLETE,
            customer_id=user.id,
            customer_name=user.name,
            company_name=user.company_name,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    name=item.name,
                    quantity=item.quantity,
                    regist_date=item.regist_date,
                    note=item.note,
                )
                for item in cart_items
            ],
            note=note,
            checkout_key=idempotency_key,
            reservation_token=token,
        )

        try:
            await order_repo.create(db, order)
        except PyMongoError:
            # 응답만 실패하고 저장은 된 경우엔 예약을 그대로 둔다 (다음 정리 때 삭제)
            if await order_repo.find_by_id(db, order.id) is None:
                await cart_repo.release(db, token)
            logger.exception("주문 저장 실패", extra={"extra_data": {"user_id": user.id, "order_id": order.id}})
            raise

        try:
            deleted = await cart_repo.delete_reserved(db, token)
        except PyMongoError:
            # 주문은 이미 저장됨: 되돌리지 않고 남은 항목은 purge_consumed가 정리
            logger.exception("장바구니 항목 삭제 실패", extra={"extra_data": {
                "order_id": order.id, "user_id": user.id,
            }})
        else:
            if deleted != len(cart_items):
                logger.warning("장바구니 항목 삭제 수 불일치", extra={"extra_data": {
                    "order_id": order.id, "expected": len(cart_items), "deleted": deleted,
                }})

    logger.info("주문 완료 처리", extra={"extra_data": {
        "order_id": order.id, "user_id": user.id, "item_count": len(order.items),
    }})
    notification = await notify_completed([order])
    return order, notification


# === 수정 / 삭제 ===

async def update_order(db: AsyncIOMotorDatabase, order_id: str, user: User, data: OrderUpdate) -> tuple[Order, dict | None]:
    """
    주문 상태/메모 수정

    - 대기 → 완료: 관리자만 (완료 메일 발송)
    - 완료 → 대기: 불가 (완료는 종착 상태)
    - 메모: 관리자 또는 주문자 본인(대기 상태일 때만)
    """
    order = await _find_visible(db, order_id, user)

    fields: dict = {}
    escalated = False

    if data.status is not None and data.status != order.status:
        if not user.is_admin:
            raise AuthorizationError("주문 상태를 변경할 권한이 없습니다.")
        if order.is_complete:
            raise StateError("완료된 주문은 대기 상태로 되돌릴 수 없습니다.")
        fields["status"] = data.status
        escalated = data.status == ORDER_COMPLETE

    if data.note is not None and data.note != order.note:
        if not user.is_admin and order.is_complete:
            raise AuthorizationError("완료된 주문의 메모는 수정할 수 없습니다.")
        fields["note"] = data.note

    if fields and not await order_repo.update(db, order_id, fields):
        raise NotFoundError("주문을 찾을 수 없습니다.")

    updated = await order_repo.find_by_id(db, order_id)
    if updated is None:
        raise NotFoundError("주문을 찾을 수 없습니다.")

    notification = None
    if escalated:
        logger.info("주문 완료 처리(관리자)", extra={"extra_data": {"order_id": order_id, "admin_id": user.id}})
        notification = await notify_completed([updated])
    return updated, notification


async def delete_order(db: AsyncIOMotorDatabase, order_id: str, user: User) -> None:
    """관리자는 모든 주문, 일반 사용자는 본인 주문만 삭제"""
    await _find_visible(db, order_id, user)
    if not await order_repo.delete(db, order_id):
        raise NotFoundError("주문을 찾을 수 없습니다.")
    logger.info("주문 삭제", extra={"extra_data": {"order_id": order_id, "deleted_by": user.id}})


async def send_completion_notice(db: AsyncIOMotorDatabase, order_ids: list[str], recipient: str | None = None) -> dict:
    """선택한 완료 주문들의 내역 메일 발송 (관리자 화면)"""
    orders = await order_repo.find_by_ids(db, list(dict.fromkeys(order_ids)))
    if not orders:
        raise NotFoundError("주문을 찾을 수 없습니다.")
    pending = [o.id for o in orders if not o.is_complete]
    if pending:
        raise StateError("완료되지 않은 주문이 포함되어 있습니다.")
    return await notify_completed(orders, recipient)
