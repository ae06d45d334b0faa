from typing import Optional
from pydantic import Field
from models.base import TimestampedDocument


class CartItem(TimestampedDocument):
    """
    장바구니 항목: cartItems 컬렉션
    User : CartItem = 1 : N (user_id로 연결, 다른 사용자와 공유 안 함)

    같은 제품을 두 번 담으면 항목도 두 개 (합치지 않음)
    reserved_by / reserved_at: 주문 완료 처리가 진행 중일 때만 채워짐
    """
    user_id: str
    product_id: str
    name: str                   # 담을 당시 제품명 스냅샷
    quantity: int = Field(gt=0)
    regist_date: Optional[str] = None
    note: Optional[str] = None
    reserved_by: Optional[str] = None
    reserved_at: Optional[str] = None
