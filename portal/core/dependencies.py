import redis.asyncio as airedis
from core.config import settings
from core.database import init_database, close_database
from core.logger import get_logger

logger = get_logger("dependencies")

# 전역 클라이언트: lifespan에서 초기화/정리
_redis_client: airedis.Redis | None = None

# === FastAPI Depends()용 함수 ===

async def get_redis() -> airedis.Redis:
    if _redis_client is None:
        raise RuntimeError("Redis가 초기화되지 않았습니다. 서버 시작을 확인하세요.")
    return _redis_client


# === 수명주기 관리 (main.py의 lifespan에서 호출) ===

async def init_connections():
    global _redis_client

    await init_database()

    _redis_client = airedis.from_url(
        settings.redis_url,
        decode_responses=True,  # bytes → str 자동 변환
    )

    # 연결 확인
    await _redis_client.ping()
    logger.info("Redis 연결 성공")


async def close_connections():
    global _redis_client

    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None
    await close_database()

    logger.info("모든 연결 종료")
