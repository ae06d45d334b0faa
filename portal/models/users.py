from typing import Literal, Optional
from pydantic import Field
from models.base import TimestampedDocument

UserRole = Literal["user", "admin"]
UserStatus = Literal["allowed", "blocked"]


class User(TimestampedDocument):
    """
    사용자(거래처) 문서: users 컬렉션

    - password_hash: bcrypt 해시 (평문 저장 금지), 저장 필드명은 password
    - product_ids: 주문 가능한 제품 ID 목록 (일반 사용자 카탈로그 필터)
    - status: blocked면 로그인 및 모든 보호 API 거부
    - role: user / admin: 관리자는 최소 1명 유지
    """
    username: str
    password_hash: str = Field(alias="password")
    name: str
    company_name: str
    business_number: str
    phone: str
    address: str
    product_ids: list[str] = Field(default_factory=list)
    status: UserStatus = "allowed"
    role: UserRole = "user"
    last_login: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def is_active(self) -> bool:
        return self.status == "allowed"
