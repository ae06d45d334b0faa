from typing import List, Optional
from pydantic import BaseModel, Field


class CartItemCreate(BaseModel):
    """장바구니 담기: name이 없으면 현재 제품명 사용"""
    product_id: str
    quantity: int = Field(..., gt=0, description="수량 (1 이상)")
    name: Optional[str] = None
    regist_date: Optional[str] = None
    note: Optional[str] = None


class CartNoteUpdate(BaseModel):
    note: str


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    name: str
    quantity: int
    regist_date: Optional[str] = None
    note: Optional[str] = None
    created_at: str

    model_config = {
        "from_attributes": True
    }


class CheckoutRequest(BaseModel):
    """
    선택한 장바구니 항목으로 주문 완료

    idempotency_key: 같은 키로 다시 보내면 새 주문을 만들지 않고 기존 주문을 돌려줌
    """
    cart_item_ids: List[str]
    note: Optional[str] = None
    idempotency_key: Optional[str] = Field(None, min_length=1, max_length=100)
