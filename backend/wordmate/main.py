# wordmate/main.py
import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from wordmate.config import settings
from wordmate.core.db import init_db, close_db
from wordmate.core.bootstrap import ensure_default_plans
from wordmate.services.errors import ServiceError

from wordmate.api.v1.routers import auth, codes, payment, subscription

logger = logging.getLogger("uvicorn.error")

app = FastAPI(title=settings.APP_NAME)

# CORS (with Cookie)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    # Same shape as HTTPException(detail={"code", "message"})
    if exc.status_code >= 500:
        logger.error("[api] %s %s -> %s %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_detail()})

@app.on_event("startup")
async def on_startup():
    await init_db()
    # Redemption needs an active plan row per tier
    await ensure_default_plans()
    logger.info("[startup] code store backend=%s", settings.code_store_backend)

@app.on_event("shutdown")
async def on_shutdown():
    await close_db()

# REST
app.include_router(auth.router, prefix="/api/v1")
app.include_router(payment.router, prefix="/api/v1")
app.include_router(codes.router, prefix="/api/v1")
app.include_router(subscription.router, prefix="/api/v1")

@app.get("/healthz")
def healthz():
    return {"ok": True}
