"""
장바구니 API 테스트
"""
from conftest import make_user, headers_for


def _add(client, headers, product_id, quantity=1, **extra):
    return client.post("/api/cart/", json={"product_id": product_id, "quantity": quantity, **extra}, headers=headers)


def test_장바구니_담기_및_조회(client, user_headers, make_product):
    product = make_product("Widget", "P001")
    response = _add(client, user_headers, product["id"], 3, note="급함")
    assert response.status_code == 201
    # 이름/등록일은 제품에서 스냅샷
    assert response.json()["name"] == "Widget"
    assert response.json()["regist_date"] == "2024-06-01"

    items = client.get("/api/cart/", headers=user_headers).json()
    assert len(items) == 1
    assert items[0]["product_id"] == product["id"]
    assert items[0]["quantity"] == 3
    assert items[0]["note"] == "급함"


def test_같은_제품_두번_담으면_두_항목(client, user_headers, make_product):
    product = make_product()
    first = _add(client, user_headers, product["id"], 1).json()
    second = _add(client, user_headers, product["id"], 2).json()
    assert first["id"] != second["id"]
    assert len(client.get("/api/cart/", headers=user_headers).json()) == 2


def test_수량_0_이하_거부(client, user_headers, make_product):
    product = make_product()
    assert _add(client, user_headers, product["id"], 0).status_code == 422
    assert _add(client, user_headers, product["id"], -1).status_code == 422
    assert client.get("/api/cart/", headers=user_headers).json() == []


def test_없는_제품_담기_404(client, user_headers):
    assert _add(client, user_headers, "no-such-product").status_code == 404


def test_허용되지_않은_제품_담기_거부(client, admin_headers, user_headers):
    hidden = client.post("/api/products/", json={"name": "Hidden", "code": "H001"}, headers=admin_headers).json()
    response = _add(client, user_headers, hidden["id"])
    assert response.status_code == 403


def test_메모_수정(client, user_headers, make_product):
    product = make_product()
    item = _add(client, user_headers, product["id"]).json()

    response = client.patch(f"/api/cart/{item['id']}/note", json={"note": "오전 배송"}, headers=user_headers)
    assert response.status_code == 200
    assert response.json()["note"] == "오전 배송"


def test_항목_삭제(client, user_headers, make_product):
    product = make_product()
    item = _add(client, user_headers, product["id"]).json()

    assert client.delete(f"/api/cart/{item['id']}", headers=user_headers).status_code == 204
    assert client.get("/api/cart/", headers=user_headers).json() == []
    # 이미 지운 항목
    assert client.delete(f"/api/cart/{item['id']}", headers=user_headers).status_code == 404


def test_다른_사용자의_항목은_수정_삭제_불가(client, db, user_headers, make_product):
    product = make_product()
    item = _add(client, user_headers, product["id"], 2, note="원래 메모").json()

    other_headers = headers_for(make_user(db))
    assert client.delete(f"/api/cart/{item['id']}", headers=other_headers).status_code == 403
    assert client.patch(
        f"/api/cart/{item['id']}/note", json={"note": "남의 메모"}, headers=other_headers
    ).status_code == 403

    # 원래 주인의 장바구니는 그대로
    items = client.get("/api/cart/", headers=user_headers).json()
    assert len(items) == 1
    assert items[0]["note"] == "원래 메모"
    # 다른 사용자 장바구니에는 안 보임
    assert client.get("/api/cart/", headers=other_headers).json() == []
