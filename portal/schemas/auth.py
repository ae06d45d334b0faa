from typing import List, Optional
from pydantic import BaseModel


class UserResponse(BaseModel):
    """유저 정보 응답 (비밀번호 해시 제외!)"""
    id: str
    username: str
    name: str
    company_name: str
    business_number: str
    phone: str
    address: str
    product_ids: List[str]
    status: str
    role: str
    last_login: Optional[str] = None
    created_at: str
    updated_at: str

    model_config = {
        "from_attributes": True  # models.User 객체를 그대로 변환
    }


class Token(BaseModel):
    """로그인 성공 시 돌려줄 세션 토큰"""
    access_token: str
    token_type: str = "bearer"
