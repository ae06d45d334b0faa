from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from core.config import settings
from core.logger import get_logger

logger = get_logger("database")


class Collections:
    """컬렉션 이름: 저장소 계층은 문자열을 직접 쓰지 않고 여기서 가져옴"""
    users = "users"
    products = "products"
    orders = "orders"
    cart_items = "cartItems"


# 전역 클라이언트: 프로세스당 1개, lifespan에서 초기화/정리
_client: AsyncIOMotorClient | None = None


async def init_database() -> None:
    global _client

    _client = AsyncIOMotorClient(settings.mongodb_uri)

    # 연결 확인
    await _client.admin.command("ping")
    await ensure_indexes(_client[settings.mongodb_db])
    logger.info("MongoDB 연결 성공", extra={"extra_data": {"db": settings.mongodb_db}})


async def close_database() -> None:
    global _client

    if _client:
        _client.close()
        _client = None


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """유니크/조회용 인덱스 생성 (이미 있으면 무시됨)"""
    await db[Collections.users].create_index("username", unique=True)
    await db[Collections.products].create_index("code", unique=True)
    await db[Collections.products].create_index([("name", ASCENDING)])
    await db[Collections.orders].create_index([("customerId", ASCENDING), ("date", DESCENDING)])
    await db[Collections.orders].create_index("items.productId")
    await db[Collections.orders].create_index(
        [("customerId", ASCENDING), ("checkoutKey", ASCENDING)],
        unique=True,
        partialFilterExpression={"checkoutKey": {"$type": "string"}},
    )
    await db[Collections.orders].create_index("reservationToken", sparse=True)
    await db[Collections.cart_items].create_index([("userId", ASCENDING), ("createdAt", DESCENDING)])
    await db[Collections.cart_items].create_index("reservedBy")


# FastAPI Depends()용: 테스트에서는 dependency_overrides로 교체
async def get_db() -> AsyncIOMotorDatabase:
    if _client is None:
        raise RuntimeError("MongoDB가 초기화되지 않았습니다. 서버 시작을 확인하세요.")
    return _client[settings.mongodb_db]
