from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class UserCreate(BaseModel):
    """관리자가 거래처 계정을 추가할 때 받을 데이터 (모든 항목 필수)"""
    username: str = Field(..., max_length=50, description="계정 아이디")
    password: str = Field(..., max_length=72, description="비밀번호 (bcrypt 제한 72바이트)")
    name: str
    company_name: str
    business_number: str
    phone: str
    address: str
    product_ids: List[str] = []
    status: Literal["allowed", "blocked"] = "allowed"
    role: Literal["user", "admin"] = "user"

    @field_validator("username", "name", "company_name", "business_number", "phone", "address")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("모든 필수 필드를 입력해주세요.")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_not_blank(cls, v: str) -> str:
        # 비밀번호는 공백 포함 그대로 해싱
        if not v:
            raise ValueError("비밀번호를 입력해주세요.")
        return v


class UserUpdate(BaseModel):
    """
    계정 수정: 보낸 필드만 반영
    password가 비어 있거나 없으면 기존 해시 유지
    """
    username: Optional[str] = Field(None, max_length=50)
    password: Optional[str] = Field(None, max_length=72)
    name: Optional[str] = None
    company_name: Optional[str] = None
    business_number: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    product_ids: Optional[List[str]] = None
    status: Optional[Literal["allowed", "blocked"]] = None
    role: Optional[Literal["user", "admin"]] = None

    @field_validator("username", "name", "company_name", "business_number", "phone", "address")
    @classmethod
    def not_blank(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("모든 필수 필드를 입력해주세요.")
        return v.strip() if v is not None else v


class EntitlementResponse(BaseModel):
    user_id: str
    product_ids: List[str]
