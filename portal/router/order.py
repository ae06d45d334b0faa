from fastapi import APIRouter, Depends, Query, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from core.database import get_db
from core.security import get_current_active_user, get_current_admin_user
from models.users import User
from schemas.order import (
    NotificationResult,
    OrderCreate,
    OrderMutationResponse,
    OrderNotifyRequest,
    OrderResponse,
    OrderUpdate,
)
from service import order_service

router = APIRouter()


@router.get("/", response_model=List[OrderResponse])
async def list_orders(
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """주문 목록 (최신순): 관리자는 전체, 일반 사용자는 본인 주문"""
    orders = await order_service.get_orders(db, current_user)
    return [OrderResponse.model_validate(o) for o in orders]


@router.get("/recent", response_model=List[OrderResponse])
async def list_recent_orders(
    limit: int = Query(5, ge=1, le=order_service.MAX_RECENT),
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """대시보드용 최근 주문"""
    orders = await order_service.get_recent_orders(db, current_user, limit)
    return [OrderResponse.model_validate(o) for o in orders]


@router.post("/", response_model=OrderMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    data: OrderCreate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """직접 주문 생성"""
    order, notification = await order_service.create_order(db, current_user, data)
    return OrderMutationResponse(order=OrderResponse.model_validate(order), notification=notification)


@router.post("/notify", response_model=NotificationResult)
async def notify_orders(
    data: OrderNotifyRequest,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """완료 주문 내역 메일 발송"""
    return await order_service.send_completion_notice(db, data.order_ids, data.recipient)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    return OrderResponse.model_validate(await order_service.get_order(db, order_id, current_user))


@router.patch("/{order_id}", response_model=OrderMutationResponse)
async def update_order(
    order_id: str,
    data: OrderUpdate,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """상태 변경(관리자) / 메모 수정"""
    order, notification = await order_service.update_order(db, order_id, current_user, data)
    return OrderMutationResponse(order=OrderResponse.model_validate(order), notification=notification)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    await order_service.delete_order(db, order_id, current_user)
