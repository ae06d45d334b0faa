from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from redis.asyncio import Redis
from typing import List

from core.database import get_db
from core.dependencies import get_redis
from core.security import get_current_active_user
from models.users import User
from schemas.cart import CartItemCreate, CartItemResponse, CartNoteUpdate, CheckoutRequest
from schemas.order import CheckoutResponse, OrderResponse
from service import cart_service, order_service

router = APIRouter()


@router.get("/", response_model=List[CartItemResponse])
async def list_cart(
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """내 장바구니 (최신순)"""
    items = await cart_service.get_cart_items(db, current_user.id)
    return [CartItemResponse.model_validate(item) for item in items]


@router.post("/", response_model=CartItemResponse, status_code=status.HTTP_201_CREATED)
async def add_to_cart(
    data: CartItemCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """장바구니 담기 (같은 제품도 새 항목으로 추가)"""
    item = await cart_service.add_to_cart(db, current_user, data)
    return CartItemResponse.model_validate(item)


@router.post("/checkout", response_model=CheckoutResponse, status_code=status.HTTP_201_CREATED)
async def checkout(
    data: CheckoutRequest,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
    redis: Redis = Depends(get_redis),
):
    """선택한 장바구니 항목으로 주문 완료 처리"""
    order, notification = await order_service.checkout(
        db, redis, current_user, data.cart_item_ids, data.note, data.idempotency_key
    )
    return CheckoutResponse(
        order_id=order.id,
        order=OrderResponse.model_validate(order),
        notification=notification,
    )


@router.patch("/{item_id}/note", response_model=CartItemResponse)
async def update_note(
    item_id: str,
    data: CartNoteUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    item = await cart_service.update_cart_item_note(db, current_user.id, item_id, data.note)
    return CartItemResponse.model_validate(item)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_from_cart(
    item_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    await cart_service.remove_from_cart(db, current_user.id, item_id)
