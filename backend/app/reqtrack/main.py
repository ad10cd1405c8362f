import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from reqtrack import __version__
from reqtrack.api.v1.routes import router as v1_router
from reqtrack.core.config import settings
from reqtrack.database.config import init_db
from reqtrack.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.CREATE_TABLES_ON_STARTUP:
        init_db()
    yield


app = FastAPI(title="ReqTrack", version=__version__, lifespan=lifespan)
app.include_router(v1_router)


@app.exception_handler(SQLAlchemyError)
async def store_failure_handler(request: Request, exc: SQLAlchemyError):
    """数据库错误统一返回 500，不做重试"""
    logger.exception(f"Store failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/healthz", include_in_schema=False)
def healthz():
    return {"ok": True}
