from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from models.base import Document, now_iso

OrderStatus = Literal["대기", "완료"]
ORDER_PENDING: OrderStatus = "대기"
ORDER_COMPLETE: OrderStatus = "완료"


class OrderItem(BaseModel):
    """
    주문 라인: 주문 문서 안에 내장되는 스냅샷

    제품명/수량은 주문 시점 값 그대로 보존
    (이후 제품 수정/삭제가 과거 주문을 바꾸지 않음)
    product_id는 제품 삭제 시 참조 검사에 사용
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    product_id: str
    name: str
    quantity: int = Field(gt=0)
    regist_date: Optional[str] = None
    note: Optional[str] = None


class Order(Document):
    """
    주문 문서: orders 컬렉션
    User : Order = 1 : N (customer_id로 연결)

    상태: 대기 → 완료 (완료는 종착 상태), 삭제는 하드 삭제
    checkout_key: 장바구니 주문 완료 요청의 멱등 키 (없으면 None)
    reservation_token: 이 주문을 만든 장바구니 예약 토큰 (직접 생성한 주문은 None)
    """
    date: str = Field(default_factory=now_iso)
    status: OrderStatus = ORDER_PENDING
    customer_id: str
    customer_name: str
    company_name: Optional[str] = None
    items: list[OrderItem]
    note: Optional[str] = None
    checkout_key: Optional[str] = None
    reservation_token: Optional[str] = None
    updated_at: str = Field(default_factory=now_iso)

    @property
    def is_complete(self) -> bool:
        return self.status == ORDER_COMPLETE
