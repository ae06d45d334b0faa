from motor.motor_asyncio import AsyncIOMotorDatabase
from core.database import Collections
from models.base import now_iso
from models.order import Order


def _visibility_query(customer_id: str | None) -> dict:
    # customer_id가 None이면 전체 (관리자)
    return {} if customer_id is None else {"customerId": customer_id}


async def create(db: AsyncIOMotorDatabase, order: Order) -> Order:
    """주문 저장"""
    doc = order.to_document()
    if doc.get("checkoutKey") is None:
        # 멱등 키 유니크 인덱스는 문자열 값에만 걸림: 없으면 필드 자체를 빼둠
        doc.pop("checkoutKey", None)
    await db[Collections.orders].insert_one(doc)
    return order


async def find_by_id(db: AsyncIOMotorDatabase, order_id: str) -> Order | None:
    return Order.from_document(await db[Collections.orders].find_one({"_id": order_id}))


async def find_by_ids(db: AsyncIOMotorDatabase, order_ids: list[str]) -> list[Order]:
    cursor = db[Collections.orders].find({"_id": {"$in": order_ids}}).sort("date", -1)
    return [Order.from_document(doc) for doc in await cursor.to_list(length=None)]


async def find_by_checkout_key(db: AsyncIOMotorDatabase, customer_id: str, checkout_key: str) -> Order | None:
    doc = await db[Collections.orders].find_one({"customerId": customer_id, "checkoutKey": checkout_key})
    return Order.from_document(doc)


async def find_consumed_tokens(db: AsyncIOMotorDatabase, tokens: list[str]) -> list[str]:
    """주어진 예약 토큰 중 이미 주문으로 저장된 것"""
    if not tokens:
        return []
    return await db[Collections.orders].distinct("reservationToken", {"reservationToken": {"$in": tokens}})


async def find_all(db: AsyncIOMotorDatabase, customer_id: str | None = None, limit: int = 0) -> list[Order]:
    """주문 목록 (최신순), limit=0이면 제한 없음"""
    cursor = db[Collections.orders].find(_visibility_query(customer_id)).sort("date", -1)
    if limit:
        cursor = cursor.limit(limit)
    return [Order.from_document(doc) for doc in await cursor.to_list(length=None)]


async def exists_with_product(db: AsyncIOMotorDatabase, product_id: str) -> bool:
    """주문 라인 중 해당 제품을 참조하는 것이 있는지 (productId 외래키로만 판단)"""
    return await db[Collections.orders].find_one({"items.productId": product_id}) is not None


async def update(db: AsyncIOMotorDatabase, order_id: str, fields: dict) -> bool:
    result = await db[Collections.orders].update_one(
        {"_id": order_id},
        {"$set": {**fields, "updatedAt": now_iso()}},
    )
    return result.matched_count > 0


async def delete(db: AsyncIOMotorDatabase, order_id: str) -> bool:
    result = await db[Collections.orders].delete_one({"_id": order_id})
    return result.deleted_count > 0
