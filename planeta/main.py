import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from planeta.core.config import settings
from planeta.core.database import engine, Base
from planeta.core.exceptions import ForumError
from planeta.core.logger import setup_logging
from planeta.schemas.common import ResponseModel, MISSING_FIELDS_MSG
from planeta.routers import (
    admin, blog_comments, forum, forum_comments, forum_replies, moderation, recipe_comments,
)
from planeta.tasks.jobs import start_scheduler, stop_scheduler


logger = logging.getLogger(__name__)

# Create database tables
Base.metadata.create_all(bind=engine)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    logger.info(f"{settings.APP_NAME} started ({settings.ENVIRONMENT})")
    yield
    stop_scheduler()


app = FastAPI(
    title=settings.APP_NAME,
    description="API de la comunidad Planeta Keto: foro, comentarios y moderación",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_request(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    if request.url.path.startswith(settings.API_V1_PREFIX) and request.method != "OPTIONS":
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} ({process_time * 1000:.1f} ms)"
        )
    return response


def error_response(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ResponseModel(code=status_code, msg=msg).model_dump(),
    )


@app.exception_handler(ForumError)
async def forum_error_handler(request: Request, exc: ForumError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path}: {exc.msg}")
    return error_response(exc.status_code, exc.msg)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return error_response(400, MISSING_FIELDS_MSG)
    first = errors[0]
    if first["type"] == "missing":
        msg = MISSING_FIELDS_MSG
    elif first["type"] == "forum_invalid":
        msg = first["msg"]
    elif first["type"] == "json_invalid":
        msg = "Cuerpo de la petición inválido"
    else:
        field = first["loc"][-1] if first.get("loc") else "?"
        msg = f"Valor inválido para '{field}'"
    return error_response(400, msg)


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Store error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Error interno del servidor")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Error interno del servidor")


# Include routers (replies / comments 必须先于 forum 的 /{post_ref} 注册)
app.include_router(forum_replies.router, prefix=settings.API_V1_PREFIX)
app.include_router(forum_comments.router, prefix=settings.API_V1_PREFIX)
app.include_router(forum.router, prefix=settings.API_V1_PREFIX)
app.include_router(recipe_comments.router, prefix=settings.API_V1_PREFIX)
app.include_router(blog_comments.router, prefix=settings.API_V1_PREFIX)
app.include_router(moderation.router, prefix=settings.API_V1_PREFIX)
app.include_router(admin.router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root():
    return {"message": "Planeta Keto community API", "docs": "/docs"}


@app.get("/health")
def health_check():
    return {"status": "healthy"}
