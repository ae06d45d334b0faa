from motor.motor_asyncio import AsyncIOMotorDatabase
from core.database import Collections
from models.base import now_iso
from models.users import User


async def find_all(db: AsyncIOMotorDatabase) -> list[User]:
    """전체 유저 조회 (아이디순)"""
    cursor = db[Collections.users].find({}).sort("username", 1)
    return [User.from_document(doc) for doc in await cursor.to_list(length=None)]


async def find_by_id(db: AsyncIOMotorDatabase, user_id: str) -> User | None:
    return User.from_document(await db[Collections.users].find_one({"_id": user_id}))


async def find_by_username(db: AsyncIOMotorDatabase, username: str, exclude_id: str | None = None) -> User | None:
    """유저네임으로 유저 조회 (exclude_id: 수정 시 자기 자신 제외)"""
    query: dict = {"username": username}
    if exclude_id:
        query["_id"] = {"$ne": exclude_id}
    return User.from_document(await db[Collections.users].find_one(query))


async def count_admins(db: AsyncIOMotorDatabase) -> int:
    return await db[Collections.users].count_documents({"role": "admin"})


async def create(db: AsyncIOMotorDatabase, user: User) -> User:
    """유저 저장"""
    await db[Collections.users].insert_one(user.to_document())
    return user


async def update(db: AsyncIOMotorDatabase, user_id: str, fields: dict) -> bool:
    """저장 필드명(camelCase) 기준 부분 수정: 대상이 없으면 False"""
    result = await db[Collections.users].update_one(
        {"_id": user_id},
        {"$set": {**fields, "updatedAt": now_iso()}},
    )
    return result.matched_count > 0


async def pull_product_id(db: AsyncIOMotorDatabase, product_id: str) -> int:
    """삭제된 제품을 모든 유저의 허용 목록에서 제거"""
    result = await db[Collections.users].update_many(
        {"productIds": product_id},
        {"$pull": {"productIds": product_id}},
    )
    return result.modified_count


async def touch_last_login(db: AsyncIOMotorDatabase, user_id: str) -> None:
    await db[Collections.users].update_one({"_id": user_id}, {"$set": {"lastLogin": now_iso()}})


async def delete(db: AsyncIOMotorDatabase, user_id: str) -> bool:
    result = await db[Collections.users].delete_one({"_id": user_id})
    return result.deleted_count > 0
