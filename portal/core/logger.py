import logging
import json
import uuid
from datetime import datetime, timezone
from contextvars import ContextVar

# 미들웨어가 요청 시작 시 채움, 요청 밖(CLI, 기동 로그)에서는 "-"
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")


class JsonFormatter(logging.Formatter):
    """
    한 줄 JSON 로그

    {"timestamp": "...", "level": "INFO", "message": "주문 완료 처리", "logger": "order",
     "request_id": "1a2b3c4d", "order_id": "...", "user_id": "..."}

    logger.info(msg, extra={"extra_data": {...}})로 넘긴 값은 최상위 키로 펼쳐짐
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "request_id": request_id_var.get(),
        }
        entry.update(getattr(record, "extra_data", None) or {})

        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)

        # datetime 등 JSON 기본 타입이 아닌 값은 문자열로
        return json.dumps(entry, ensure_ascii=False, default=str)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)

    # 모듈마다 get_logger를 부르므로 핸들러는 처음 한 번만
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
        logger.propagate = False

    return logger


def generate_request_id() -> str:
    """X-Request-ID가 없을 때 쓰는 8자리 추적 ID"""
    return uuid.uuid4().hex[:8]
