import uuid
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def now_iso() -> str:
    """
    UTC ISO-8601 문자열 (밀리초 고정 자릿수)

    고정 자릿수라서 문자열 정렬 == 시간 정렬
    예: 2026-10-19T03:12:45.120+00:00
    """
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


def today() -> str:
    """YYYY-MM-DD (등록일 기본값)"""
    return datetime.now(timezone.utc).date().isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Document(BaseModel):
    """
    MongoDB 문서의 공통 베이스

    - 파이썬 속성은 snake_case, 저장 필드는 camelCase (customer_id ↔ customerId)
    - id는 _id로 저장, UUID v4 문자열
    - to_document()로 저장용 dict, from_document()로 모델 복원
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(default_factory=new_id, alias="_id")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True)

    @classmethod
    def from_document(cls, doc: dict | None):
        if doc is None:
            return None
        return cls.model_validate(doc)


class TimestampedDocument(Document):
    """생성/수정 시간이 있는 문서: updated_at은 저장소 계층에서 갱신"""
    created_at: str = Field(default_factory=now_iso)
    updated_at: str = Field(default_factory=now_iso)
