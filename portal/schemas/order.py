from typing import List, Literal, Optional
from pydantic import BaseModel, Field


class OrderItemIn(BaseModel):
    product_id: str
    name: str
    quantity: int = Field(..., gt=0)
    regist_date: Optional[str] = None
    note: Optional[str] = None


class OrderCreate(BaseModel):
    """
    직접 주문 생성

    customer_id / status는 관리자만 의미 있음
    (일반 사용자는 항상 본인 + 대기 상태)
    """
    items: List[OrderItemIn]
    note: Optional[str] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    status: Literal["대기", "완료"] = "대기"


class OrderUpdate(BaseModel):
    """상태 변경(관리자) 또는 메모 수정"""
    status: Optional[Literal["대기", "완료"]] = None
    note: Optional[str] = None


class OrderNotifyRequest(BaseModel):
    order_ids: List[str] = Field(..., min_length=1)
    recipient: Optional[str] = None


class OrderItemResponse(BaseModel):
    product_id: str
    name: str
    quantity: int
    regist_date: Optional[str] = None
    note: Optional[str] = None

    model_config = {
        "from_attributes": True
    }


class OrderResponse(BaseModel):
    id: str
    date: str
    status: str
    customer_id: str
    customer_name: str
    company_name: Optional[str] = None
    items: List[OrderItemResponse]
    note: Optional[str] = None

    model_config = {
        "from_attributes": True
    }


class NotificationResult(BaseModel):
    """메일 발송 결과: 실패해도 주문은 이미 저장된 상태"""
    success: bool = False
    error: Optional[str] = None


class CheckoutResponse(BaseModel):
    """notification이 None이면 멱등 키 재요청 (기존 주문 반환, 메일 재발송 없음)"""
    order_id: str
    order: OrderResponse
    notification: Optional[NotificationResult] = None


class OrderMutationResponse(BaseModel):
    """주문 생성/수정 결과: 완료 상태가 된 경우에만 notification 포함"""
    order: OrderResponse
    notification: Optional[NotificationResult] = None
