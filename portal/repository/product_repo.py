from motor.motor_asyncio import AsyncIOMotorDatabase
from core.database import Collections
from models.base import now_iso
from models.product import Product


async def find_all(db: AsyncIOMotorDatabase) -> list[Product]:
    """제품 목록 (이름순)"""
    cursor = db[Collections.products].find({}).sort("name", 1)
    return [Product.from_document(doc) for doc in await cursor.to_list(length=None)]


async def find_by_ids(db: AsyncIOMotorDatabase, product_ids: list[str]) -> list[Product]:
    """지정한 ID의 제품만 (이름순)"""
    cursor = db[Collections.products].find({"_id": {"$in": product_ids}}).sort("name", 1)
    return [Product.from_document(doc) for doc in await cursor.to_list(length=None)]


async def find_by_id(db: AsyncIOMotorDatabase, product_id: str) -> Product | None:
    return Product.from_document(await db[Collections.products].find_one({"_id": product_id}))


async def find_by_code(db: AsyncIOMotorDatabase, code: str, exclude_id: str | None = None) -> Product | None:
    """코드로 조회: 정확히 일치(대소문자 구분)"""
    query: dict = {"code": code}
    if exclude_id:
        query["_id"] = {"$ne": exclude_id}
    return Product.from_document(await db[Collections.products].find_one(query))


async def create(db: AsyncIOMotorDatabase, product: Product) -> Product:
    await db[Collections.products].insert_one(product.to_document())
    return product


async def update(db: AsyncIOMotorDatabase, product_id: str, fields: dict) -> bool:
    result = await db[Collections.products].update_one(
        {"_id": product_id},
        {"$set": {**fields, "updatedAt": now_iso()}},
    )
    return result.matched_count > 0


async def delete(db: AsyncIOMotorDatabase, product_id: str) -> bool:
    result = await db[Collections.products].delete_one({"_id": product_id})
    return result.deleted_count > 0
