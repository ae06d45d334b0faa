"""
제품 관리 API 테스트
"""
from repository import product_repo


def test_제품_추가_및_목록_이름순(client, admin_headers):
    client.post("/api/products/", json={"name": "나사", "code": "B001"}, headers=admin_headers)
    client.post("/api/products/", json={"name": "가위", "code": "A001"}, headers=admin_headers)

    response = client.get("/api/products/", headers=admin_headers)
    assert response.status_code == 200
    names = [p["name"] for p in response.json()]
    assert names == sorted(names)
    # 등록일 미입력 시 오늘 날짜
    assert all(len(p["regist_date"]) == 10 for p in response.json())


def test_제품_코드_중복_거부(client, admin_headers):
    first = client.post("/api/products/", json={"name": "Widget", "code": "P001"}, headers=admin_headers)
    assert first.status_code == 201

    dup = client.post("/api/products/", json={"name": "Other", "code": "P001"}, headers=admin_headers)
    assert dup.status_code == 409
    assert dup.json()["error"] == "이미 존재하는 제품 코드입니다."

    # 저장소는 그대로
    products = client.get("/api/products/", headers=admin_headers).json()
    assert [p["name"] for p in products] == ["Widget"]


def test_제품_코드는_대소문자_구분(client, admin_headers):
    client.post("/api/products/", json={"name": "Upper", "code": "P001"}, headers=admin_headers)
    response = client.post("/api/products/", json={"name": "Lower", "code": "p001"}, headers=admin_headers)
    assert response.status_code == 201


def test_제품_수정_자기_코드는_중복_아님(client, admin_headers):
    created = client.post("/api/products/", json={"name": "Widget", "code": "P001"}, headers=admin_headers).json()
    client.post("/api/products/", json={"name": "Gadget", "code": "P002"}, headers=admin_headers)

    same_code = client.put(f"/api/products/{created['id']}", json={"name": "Widget2", "code": "P001"}, headers=admin_headers)
    assert same_code.status_code == 200
    assert same_code.json()["name"] == "Widget2"

    taken = client.put(f"/api/products/{created['id']}", json={"code": "P002"}, headers=admin_headers)
    assert taken.status_code == 409


def test_없는_제품_수정_삭제_404(client, admin_headers):
    assert client.put("/api/products/nope", json={"name": "x"}, headers=admin_headers).status_code == 404
    assert client.delete("/api/products/nope", headers=admin_headers).status_code == 404


def test_제품_삭제(client, admin_headers):
    created = client.post("/api/products/", json={"name": "Widget", "code": "P001"}, headers=admin_headers).json()
    assert client.delete(f"/api/products/{created['id']}", headers=admin_headers).status_code == 204
    assert client.get(f"/api/products/{created['id']}", headers=admin_headers).status_code == 404


def test_주문에_포함된_제품_삭제_거부(client, admin_headers, user_headers, make_product):
    product = make_product("Widget", "P001")
    item = client.post("/api/cart/", json={"product_id": product["id"], "quantity": 1}, headers=user_headers).json()
    client.post("/api/cart/checkout", json={"cart_item_ids": [item["id"]]}, headers=user_headers)

    response = client.delete(f"/api/products/{product['id']}", headers=admin_headers)
    assert response.status_code == 409
    assert client.get(f"/api/products/{product['id']}", headers=admin_headers).status_code == 200


def test_이름에_ID가_들어간_주문은_참조로_보지_않음(client, admin_headers):
    """참조 판단은 productId로만: 제품명 문자열 매칭 안 함"""
    created = client.post("/api/products/", json={"name": "Widget", "code": "P001"}, headers=admin_headers).json()
    client.post("/api/orders/", json={
        "items": [{"product_id": "other", "name": f"note {created['id']}", "quantity": 1}],
    }, headers=admin_headers)

    assert client.delete(f"/api/products/{created['id']}", headers=admin_headers).status_code == 204


def test_일반_사용자는_허용된_제품만_조회(client, admin_headers, user_headers, make_product):
    allowed = make_product("Allowed", "P001")
    client.post("/api/products/", json={"name": "Hidden", "code": "P999"}, headers=admin_headers)

    response = client.get("/api/products/available", headers=user_headers)
    assert [p["id"] for p in response.json()] == [allowed["id"]]

    admin_view = client.get("/api/products/available", headers=admin_headers)
    assert len(admin_view.json()) == 2


def test_일반_사용자_제품_추가_차단(client, user_headers):
    response = client.post("/api/products/", json={"name": "X", "code": "X1"}, headers=user_headers)
    assert response.status_code == 403


def test_동시_추가로_코드가_겹치면_409(client, admin_headers, monkeypatch):
    """중복 확인을 통과해도 유니크 인덱스에서 걸리면 같은 409"""
    client.post("/api/products/", json={"name": "Widget", "code": "P001"}, headers=admin_headers)

    async def not_found(db, code, exclude_id=None):
        return None

    monkeypatch.setattr(product_repo, "find_by_code", not_found)
    response = client.post("/api/products/", json={"name": "Other", "code": "P001"}, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["error"] == "이미 존재하는 제품 코드입니다."

    other = client.post("/api/products/", json={"name": "Gadget", "code": "P002"}, headers=admin_headers).json()
    response = client.put(f"/api/products/{other['id']}", json={"code": "P001"}, headers=admin_headers)
    assert response.status_code == 409
    assert client.get(f"/api/products/{other['id']}", headers=admin_headers).json()["code"] == "P002"


def test_제품_삭제시_허용_목록에서도_제거(client, admin_headers, normal_user, make_product):
    kept = make_product("Kept", "P001")
    removed = make_product("Removed", "P002")

    assert client.delete(f"/api/products/{removed['id']}", headers=admin_headers).status_code == 204

    entitled = client.get(f"/api/users/{normal_user.id}/products", headers=admin_headers).json()
    assert entitled["product_ids"] == [kept["id"]]
