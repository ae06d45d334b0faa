import time
from collections import defaultdict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from core.logger import get_logger, generate_request_id, request_id_var

logger = get_logger("metrics")


def _route_path(request: Request) -> str:
    """/api/orders/3f2a... → /api/orders/{order_id} (ID별로 집계가 쪼개지지 않게)"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class MetricsStore:
    """메트릭 저장소: 인메모리 집계 (프로세스 단위)"""

    def __init__(self):
        self.total_requests = 0
        self.total_errors = 0                  # 4xx/5xx
        self.by_status = defaultdict(int)      # {200: 42, 404: 3, 409: 1}
        self.by_route = defaultdict(int)       # {"POST /api/cart/checkout": 12}
        self.total_duration_ms = 0.0
        self.slowest = []                      # 느린 요청 Top 5

    def record(self, method: str, path: str, status: int, duration_ms: float):
        self.total_requests += 1
        if status >= 400:
            self.total_errors += 1
        self.by_status[status] += 1
        self.by_route[f"{method} {path}"] += 1
        self.total_duration_ms += duration_ms

        self.slowest.append({
            "duration_ms": round(duration_ms, 1),
            "method": method,
            "path": path,
            "status": status,
        })
        self.slowest.sort(key=lambda x: x["duration_ms"], reverse=True)
        self.slowest = self.slowest[:5]

    def summary(self) -> dict:
        avg = round(self.total_duration_ms / self.total_requests, 1) if self.total_requests else 0
        return {
            "total_requests": self.total_requests,
            "total_errors": self.total_errors,
            "avg_response_time_ms": avg,
            "by_status": dict(self.by_status),
            "by_route": dict(self.by_route),
            "slowest_top5": self.slowest,
        }


# 싱글톤 인스턴스
metrics_store = MetricsStore()


class RequestMetricsMiddleware(BaseHTTPMiddleware):
    """
    모든 HTTP 요청 계측

    1. 요청마다 request_id 부여 (로그 추적용, 응답 헤더 X-Request-ID)
    2. 응답 시간 측정 + 라우트 단위 집계
    3. 요청당 JSON 로그 한 줄
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        req_id = request.headers.get("X-Request-ID") or generate_request_id()
        request_id_var.set(req_id)

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start) * 1000

        path = _route_path(request)
        metrics_store.record(
            method=request.method,
            path=path,
            status=response.status_code,
            duration_ms=duration_ms,
        )

        logger.info(
            f"{request.method} {path} {response.status_code} {duration_ms:.0f}ms",
            extra={"extra_data": {
                "method": request.method,
                "path": request.url.path,
                "route": path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 1),
            }}
        )

        response.headers["X-Request-ID"] = req_id
        return response
