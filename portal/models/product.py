from pydantic import Field
from models.base import TimestampedDocument, today


class Product(TimestampedDocument):
    """제품 문서: products 컬렉션, code는 대소문자 구분 유일값"""
    name: str
    code: str
    regist_date: str = Field(default_factory=today)
