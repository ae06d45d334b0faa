from motor.motor_asyncio import AsyncIOMotorDatabase
from core.database import Collections
from models.base import now_iso
from models.cart import CartItem


async def find_by_user_id(db: AsyncIOMotorDatabase, user_id: str) -> list[CartItem]:
    """유저의 장바구니 (최신순)"""
    cursor = db[Collections.cart_items].find({"userId": user_id}).sort("createdAt", -1)
    return [CartItem.from_document(doc) for doc in await cursor.to_list(length=None)]


async def find_by_id(db: AsyncIOMotorDatabase, item_id: str) -> CartItem | None:
    return CartItem.from_document(await db[Collections.cart_items].find_one({"_id": item_id}))


async def find_by_id_and_user(db: AsyncIOMotorDatabase, item_id: str, user_id: str) -> CartItem | None:
    """특정 항목 조회 (본인 것만)"""
    doc = await db[Collections.cart_items].find_one({"_id": item_id, "userId": user_id})
    return CartItem.from_document(doc)


async def create(db: AsyncIOMotorDatabase, item: CartItem) -> CartItem:
    await db[Collections.cart_items].insert_one(item.to_document())
    return item


async def update_note(db: AsyncIOMotorDatabase, item_id: str, user_id: str, note: str) -> bool:
    result = await db[Collections.cart_items].update_one(
        {"_id": item_id, "userId": user_id},
        {"$set": {"note": note, "updatedAt": now_iso()}},
    )
    return result.matched_count > 0


async def delete(db: AsyncIOMotorDatabase, item_id: str, user_id: str) -> bool:
    result = await db[Collections.cart_items].delete_one({"_id": item_id, "userId": user_id})
    return result.deleted_count > 0


# === 주문 완료 처리용 예약 ===
# reserve → (주문 저장) → delete_reserved, 실패 시 release

async def reserve(
    db: AsyncIOMotorDatabase, user_id: str, item_ids: list[str], token: str, stale_before: str
) -> int:
    """
    선택 항목 중 본인 소유 + 예약되지 않은(또는 예약이 stale_before 이전에 걸린) 항목에 예약 표시

    Returns:
        예약된 항목 수
    """
    result = await db[Collections.cart_items].update_many(
        {
            "_id": {"$in": item_ids},
            "userId": user_id,
            "$or": [
                {"reservedBy": None},
                {"reservedAt": {"$lt": stale_before}},
            ],
        },
        {"$set": {"reservedBy": token, "reservedAt": now_iso()}},
    )
    return result.modified_count


async def find_reserved(db: AsyncIOMotorDatabase, token: str) -> list[CartItem]:
    """예약 토큰으로 잡아둔 항목 (담은 순서대로)"""
    cursor = db[Collections.cart_items].find({"reservedBy": token}).sort("createdAt", 1)
    return [CartItem.from_document(doc) for doc in await cursor.to_list(length=None)]


async def release(db: AsyncIOMotorDatabase, token: str) -> int:
    """예약 해제: 주문 저장 실패 시 장바구니를 원래대로"""
    result = await db[Collections.cart_items].update_many(
        {"reservedBy": token},
        {"$set": {"reservedBy": None, "reservedAt": None}},
    )
    return result.modified_count


async def delete_reserved(db: AsyncIOMotorDatabase, token: str) -> int:
    """예약 토큰으로 잡아둔 항목만 삭제 (장바구니 전체 비우기 아님)"""
    result = await db[Collections.cart_items].delete_many({"reservedBy": token})
    return result.deleted_count


async def find_reservation_tokens(db: AsyncIOMotorDatabase, user_id: str) -> list[str]:
    """유저 장바구니에 걸려 있는 예약 토큰 목록"""
    return await db[Collections.cart_items].distinct(
        "reservedBy", {"userId": user_id, "reservedBy": {"$ne": None}}
    )


async def delete_by_tokens(db: AsyncIOMotorDatabase, user_id: str, tokens: list[str]) -> int:
    result = await db[Collections.cart_items].delete_many({"userId": user_id, "reservedBy": {"$in": tokens}})
    return result.deleted_count
