import uuid
from contextlib import asynccontextmanager
from redis.asyncio import Redis

from core.config import settings
from core.errors import StateError
from core.logger import get_logger

"""
Redis 락

키 구조:
  lock:checkout:{user_id}   → 유저별 주문 완료 처리 (같은 유저의 동시 요청은 두 번째가 409)
  lock:admins               → 계정 삭제/역할 변경 (관리자 수 확인과 쓰기를 한 번에 하나만)

값은 락을 잡은 요청의 토큰 (SET NX EX)
TTL이 있어서 프로세스가 죽어도 최대 ttl 초 후 자동 해제
"""

logger = get_logger("lock")

ADMIN_LOCK_KEY = "lock:admins"


def _make_lock_key(user_id: str) -> str:
    return f"lock:checkout:{user_id}"


@asynccontextmanager
async def _redis_lock(redis: Redis, key: str, ttl: int, busy_message: str):
    token = uuid.uuid4().hex

    # SET NX: 키가 없을 때만 설정 (원자적 연산)
    acquired = await redis.set(key, token, nx=True, ex=ttl)
    if not acquired:
        logger.warning("락 획득 실패", extra={"extra_data": {"key": key}})
        raise StateError(busy_message)

    try:
        yield token
    finally:
        # TTL로 만료된 뒤 다른 요청이 잡은 락은 건드리지 않음
        if await redis.get(key) == token:
            await redis.delete(key)


def checkout_lock(redis: Redis, user_id: str):
    return _redis_lock(
        redis,
        _make_lock_key(user_id),
        settings.checkout_lock_ttl_seconds,
        "이미 처리 중인 주문이 있습니다. 잠시 후 다시 시도해주세요.",
    )


def admin_lock(redis: Redis):
    """계정 삭제/역할 변경 직렬화: 마지막 관리자 확인이 동시 요청에 뚫리지 않게"""
    return _redis_lock(
        redis,
        ADMIN_LOCK_KEY,
        settings.checkout_lock_ttl_seconds,
        "다른 계정 변경 작업이 진행 중입니다. 잠시 후 다시 시도해주세요.",
    )
