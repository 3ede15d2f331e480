"""
FastAPI 应用入口点。
"""

from pathlib import Path

from loguru import logger
from contextlib import asynccontextmanager
from fastapi.responses import RedirectResponse

from fastapi import FastAPI, Request
from src.server.dane.router import router as dane_router

from src.server.config import config

SECURITY_HEADERS = {
    "Cross-Origin-Resource-Policy": "same-origin",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "X-XSS-Protection": "0",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 启动时确保证书根目录存在
    certificates_dir = Path(config.certificates_dir)
    certificates_dir.mkdir(parents=True, exist_ok=True)
    logger.info(f"证书根目录: {certificates_dir.resolve()}")
    yield
    logger.info("应用关闭")


app = FastAPI(title="DANE Self-Signed Certificate Service", lifespan=lifespan)


@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


# 包含证书签发服务的路由
app.include_router(dane_router)

logger.info(f"config: {config.model_dump_json(indent=4)}")


@app.get("/", include_in_schema=False)
async def index() -> RedirectResponse:
    return RedirectResponse(url="/api")
