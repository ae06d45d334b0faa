from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

class Settings(BaseSettings):
    # MongoDB — URI는 필수 (없으면 기동 시점에 ValidationError로 실패)
    mongodb_uri: str
    mongodb_db: str = "biomax"

    # Redis (주문 완료 처리 락)
    redis_url: str = "redis://redis:6379"

    # 세션 토큰(JWT) 설정
    jwt_secret: str = "dev-secret-key-change-in-production"
    jwt_algorithm: str = "HS256"
    session_expire_days: int = 14

    # SMTP — smtp_host가 비어 있으면 메일 발송은 에러 결과만 돌려줌
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_starttls: bool = True
    email_sender_name: str = "바이오맥스 주문시스템"
    default_order_email: str = ""

    # 주문 완료 처리 동시성 제어 (초)
    checkout_lock_ttl_seconds: int = 30
    reservation_ttl_seconds: int = 300

    # Pydantic v2 방식: Config 내부 클래스 대신 model_config 사용
    model_config = SettingsConfigDict(
        # config.py -> core -> portal -> 루트 아래의 .env 찾기
        env_file=Path(__file__).parent.parent.parent / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,     # 환경변수 대소문자 무시
    )


# 싱글톤 인스턴스 — 앱 어디서든 import해서 사용
settings = Settings()
