from fastapi import FastAPI
from contextlib import asynccontextmanager
from core.dependencies import init_connections, close_connections
from core.errors import register_exception_handlers
from core.metrics import RequestMetricsMiddleware, metrics_store
from router import auth, product, user, cart, order

@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        # MongoDB + Redis 연결 (프로세스당 1회)
        await init_connections()
        yield
    finally:
        await close_connections()

app = FastAPI(
    title="발주시스템 API",
    description="거래처 발주(장바구니 → 주문 완료) 및 제품/계정 관리",
    version="0.1.0",
    lifespan=lifespan
)

# 미들웨어 등록 (모든 요청을 자동 계측)
app.add_middleware(RequestMetricsMiddleware)

# 도메인 에러 → {"error": message}
register_exception_handlers(app)

app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(product.router, prefix="/api/products", tags=["Products"])
app.include_router(user.router, prefix="/api/users", tags=["Users"])
app.include_router(cart.router, prefix="/api/cart", tags=["Cart"])
app.include_router(order.router, prefix="/api/orders", tags=["Orders"])

@app.get("/health")
async def health():
    return {"status": "ok"}

@app.get("/api/metrics", tags=["Monitoring"])
async def get_metrics():
    """실시간 메트릭 조회 — 총 요청 수, 에러 수, 응답 시간, 라우트별 분포 등"""
    return metrics_store.summary()
