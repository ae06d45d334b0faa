"""
인증 관련 테스트
"""
from core.security import create_access_token
from service.auth_service import get_password_hash, verify_password
from conftest import TEST_PASSWORD, make_user, headers_for


# ===== 단위 테스트 =====

def test_비밀번호_해싱_성공():
    password = "MyPassword123!"
    hashed = get_password_hash(password)
    assert hashed != password
    assert len(hashed) > 0


def test_비밀번호_검증_성공():
    password = "MyPassword123!"
    hashed = get_password_hash(password)
    assert verify_password(password, hashed) is True


def test_비밀번호_검증_실패():
    hashed = get_password_hash("correct")
    assert verify_password("wrong", hashed) is False


# ===== API 테스트 =====

def test_로그인_성공(client, normal_user):
    response = client.post("/api/auth/login", data={
        "username": normal_user.username,
        "password": TEST_PASSWORD,
    })
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["username"] == normal_user.username
    assert me.json()["last_login"] is not None
    assert "password" not in me.json()
    assert "password_hash" not in me.json()


def test_로그인_비밀번호_틀림(client, normal_user):
    response = client.post("/api/auth/login", data={
        "username": normal_user.username,
        "password": "wrong-password",
    })
    assert response.status_code == 401
    assert response.json()["error"] == "아이디 또는 비밀번호가 올바르지 않습니다."


def test_차단_계정_로그인_거부(client, db):
    blocked = make_user(db, status="blocked")
    response = client.post("/api/auth/login", data={
        "username": blocked.username,
        "password": TEST_PASSWORD,
    })
    # 잘못된 비밀번호(401)와 구분되는 응답
    assert response.status_code == 403
    assert "차단" in response.json()["error"]


def test_차단_계정_토큰으로_접근_거부(client, db):
    blocked = make_user(db, status="blocked")
    response = client.get("/api/cart/", headers=headers_for(blocked))
    assert response.status_code == 403


def test_인증_없이_접근_차단(client):
    response = client.get("/api/orders/")
    assert response.status_code == 401
    assert "error" in response.json()


def test_잘못된_토큰_거부(client):
    response = client.get("/api/orders/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401


def test_삭제된_사용자의_토큰_거부(client, db):
    from models.users import User
    ghost = User(
        username="ghost", password_hash="x", name="ghost", company_name="c",
        business_number="b", phone="p", address="a",
    )
    # DB에 저장하지 않은 사용자: 토큰은 유효해도 실패해야 함
    response = client.get("/api/orders/", headers={"Authorization": f"Bearer {create_access_token(ghost)}"})
    assert response.status_code == 401


def test_일반_사용자_관리자_API_차단(client, user_headers):
    response = client.get("/api/users/", headers=user_headers)
    assert response.status_code == 403
