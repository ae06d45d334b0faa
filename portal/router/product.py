from fastapi import APIRouter, Depends, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from typing import List

from core.database import get_db
from core.security import get_current_active_user, get_current_admin_user
from models.users import User
from schemas.product import ProductCreate, ProductUpdate, ProductResponse
from service import product_service

router = APIRouter()


@router.get("/", response_model=List[ProductResponse])
async def list_products(
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """전체 제품 목록 (이름순)"""
    products = await product_service.get_products(db)
    return [ProductResponse.model_validate(p) for p in products]


@router.get("/available", response_model=List[ProductResponse])
async def list_available_products(
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """주문 가능한 제품 목록: 일반 사용자는 허용된 제품만"""
    products = await product_service.get_available_products(db, current_user)
    return [ProductResponse.model_validate(p) for p in products]


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: str,
    current_user: User = Depends(get_current_active_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    return ProductResponse.model_validate(await product_service.get_product(db, product_id))


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    data: ProductCreate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """제품 추가 (코드 중복 시 409)"""
    return ProductResponse.model_validate(await product_service.create_product(db, data))


@router.put("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    return ProductResponse.model_validate(await product_service.update_product(db, product_id, data))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: str,
    current_user: User = Depends(get_current_admin_user),
    db: AsyncIOMotorDatabase = Depends(get_db),
):
    """제품 삭제 (주문에서 참조 중이면 409)"""
    await product_service.delete_product(db, product_id)
