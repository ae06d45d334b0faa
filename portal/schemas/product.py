from typing import Optional
from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    regist_date: Optional[str] = None     # 없으면 오늘 날짜


class ProductUpdate(BaseModel):
    """보낸 필드만 수정"""
    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = Field(None, min_length=1)
    regist_date: Optional[str] = None


class ProductResponse(BaseModel):
    id: str
    name: str
    code: str
    regist_date: str

    model_config = {
        "from_attributes": True
    }
