"""
pytest 공통 설정

- MongoDB → mongomock-motor 인메모리 DB (테스트마다 새로)
- Redis → fakeredis (앱은 async 클라이언트, 테스트 코드는 같은 서버의 sync 클라이언트)
- 유저는 DB에 직접 넣고 JWT를 직접 발급
"""
import sys
import os
import asyncio
import uuid
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# core.config import 전에 필수 환경변수 채우기
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017")

import fakeredis
import pytest
from mongomock_motor import AsyncMongoMockClient
from starlette.testclient import TestClient

from fastapi import FastAPI
from core.database import Collections, ensure_indexes, get_db
from core.dependencies import get_redis
from core.errors import register_exception_handlers
from core.security import create_access_token
from models.users import User
from router import auth, product, user, cart, order
from service.auth_service import get_password_hash

TEST_PASSWORD = "Test1234!"

# 비밀번호 해싱은 느리므로 한 번만
_TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def run(coro):
    """동기 테스트 코드에서 mongomock-motor 코루틴 실행"""
    return asyncio.run(coro)


# ===== 테스트 전용 앱 (미들웨어 없이) =====
test_app = FastAPI()
register_exception_handlers(test_app)
test_app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
test_app.include_router(product.router, prefix="/api/products", tags=["Products"])
test_app.include_router(user.router, prefix="/api/users", tags=["Users"])
test_app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
test_app.include_router(order.router, prefix="/api/orders", tags=["Orders"])


@test_app.get("/health")
async def health():
    return {"status": "ok"}


@pytest.fixture
def db():
    """테스트마다 새 인메모리 DB (운영과 같은 인덱스)"""
    mongo = AsyncMongoMockClient()
    database = mongo[f"test_{uuid.uuid4().hex[:8]}"]
    run(ensure_indexes(database))
    return database


@pytest.fixture
def redis_server():
    return fakeredis.FakeServer()


@pytest.fixture
def redis_sync(redis_server):
    """테스트 코드에서 락 키를 직접 보고/넣을 때 사용"""
    return fakeredis.FakeRedis(server=redis_server, decode_responses=True)


@pytest.fixture
def client(db, redis_server):
    """동기식 테스트 클라이언트: get_db / get_redis를 인메모리 버전으로 교체"""
    fake_redis = fakeredis.FakeAsyncRedis(server=redis_server, decode_responses=True)

    async def override_get_db():
        return db

    async def override_get_redis():
        return fake_redis

    test_app.dependency_overrides[get_db] = override_get_db
    test_app.dependency_overrides[get_redis] = override_get_redis
    with TestClient(test_app) as c:
        yield c
    test_app.dependency_overrides.clear()


def make_user(db, role: str = "user", status: str = "allowed", **fields) -> User:
    unique = uuid.uuid4().hex[:6]
    data = {
        "username": f"{role}_{unique}",
        "password_hash": _TEST_PASSWORD_HASH,
        "name": f"{role} {unique}",
        "company_name": f"회사_{unique}",
        "business_number": "123-45-67890",
        "phone": "010-1234-5678",
        "address": "서울특별시",
        "role": role,
        "status": status,
    }
    data.update(fields)
    new_user = User(**data)
    run(db[Collections.users].insert_one(new_user.to_document()))
    return new_user


def headers_for(u: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(u)}"}


@pytest.fixture
def admin_user(db):
    return make_user(db, role="admin")


@pytest.fixture
def normal_user(db):
    return make_user(db, role="user")


@pytest.fixture
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture
def user_headers(normal_user):
    return headers_for(normal_user)


@pytest.fixture
def make_product(client, admin_headers, normal_user):
    """관리자로 제품 추가 + normal_user에게 주문 권한 부여"""
    entitled: list[str] = []

    def _make(name: str = "Widget", code: str | None = None) -> dict:
        code = code or f"P{uuid.uuid4().hex[:6]}"
        response = client.post(
            "/api/products/",
            json={"name": name, "code": code, "regist_date": "2024-06-01"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        created = response.json()
        entitled.append(created["id"])
        client.put(
            f"/api/users/{normal_user.id}",
            json={"product_ids": entitled},
            headers=admin_headers,
        )
        return created

    return _make
