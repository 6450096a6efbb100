from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware
import structlog
from livebid.core.config import settings
from livebid.core.db import init_models
from livebid.core.logging import configure_logging
from livebid.middleware.request_id import RequestIDMiddleware
from livebid.auth.endpoints import router as auth_router
from livebid.auctions.endpoints import router as auctions_router
from livebid.realtime.endpoints import router as realtime_router

configure_logging()
logger = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_models()
    logger.info("Startup complete", database_url=settings.database_url.split("@")[-1])
    yield

app = FastAPI(title="livebid", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*']
)
app.add_middleware(RequestIDMiddleware)

@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Server error"})

@app.get('/')
async def root():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(auctions_router)
app.include_router(realtime_router)
