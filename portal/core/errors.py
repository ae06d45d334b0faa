"""
도메인 에러 분류

서비스 계층은 아래 예외만 던지고, main.py에 등록된 핸들러가
{"error": message} JSON + 에러 종류별 상태코드로 변환한다.
권한 없음(403)과 없음(404)은 절대 하나로 합치지 않는다.
"""
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from redis.exceptions import RedisError

from core.logger import get_logger

logger = get_logger("errors")

GENERIC_ERROR_MESSAGE = "서버 오류가 발생했습니다."


class PortalError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthenticationError(PortalError):
    """세션 없음 / 잘못된 토큰"""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(PortalError):
    """세션은 유효하지만 역할/소유권 부족"""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(PortalError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(PortalError):
    """필수 값 누락 / 형식 오류"""
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(PortalError):
    """유일성 위반 (아이디, 제품 코드)"""
    status_code = status.HTTP_409_CONFLICT


class StateError(PortalError):
    """현재 상태에서 허용되지 않는 작업 (마지막 관리자 삭제, 빈 선택 주문 등)"""
    status_code = status.HTTP_409_CONFLICT


async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=headers,
    )


async def storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    # 네트워크/DB 오류는 상세 내용을 로그에만 남기고 사용자에게는 일반 메시지
    logger.exception(
        f"{request.method} {request.url.path} 처리 중 저장소 오류",
        extra={"extra_data": {"error_type": type(exc).__name__}},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(PyMongoError, storage_error_handler)
    app.add_exception_handler(RedisError, storage_error_handler)
