from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from chronicle.api.routes import (
    book,
    book_layouts,
    categories,
    collections,
    comments,
    images,
    manuscripts,
    posts,
    research,
    save_book,
    sections,
    snapshots,
    tags,
)
from chronicle.core.config import settings
from chronicle.core.database import init_db
from chronicle.core.logging_config import setup_logging


logger = logging.getLogger(__name__)

# 应用入口：初始化 FastAPI 实例
app = FastAPI(title="Chronicle", root_path=settings.root_path or "")

# 配置 CORS，允许前端访问后端 API
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 统一错误响应体：{"error": ..., "details": ...}
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "details": jsonable_encoder(exc.errors())},
    )


# 外键或非空约束失败视为请求数据有误
@app.exception_handler(IntegrityError)
async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid reference in request", "details": str(exc.orig)},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


# 注册路由
api_prefix = settings.resolved_api_prefix
app.include_router(posts.router, prefix=f"{api_prefix}/posts", tags=["posts"])
app.include_router(categories.router, prefix=f"{api_prefix}/categories", tags=["categories"])
app.include_router(tags.router, prefix=f"{api_prefix}/tags", tags=["tags"])
app.include_router(images.router, prefix=f"{api_prefix}/images", tags=["images"])
app.include_router(manuscripts.router, prefix=f"{api_prefix}/manuscripts", tags=["manuscripts"])
app.include_router(sections.router, prefix=f"{api_prefix}/sections", tags=["sections"])
app.include_router(comments.router, prefix=f"{api_prefix}/comments", tags=["comments"])
app.include_router(snapshots.router, prefix=f"{api_prefix}/snapshots", tags=["snapshots"])
app.include_router(research.router, prefix=f"{api_prefix}/research", tags=["research"])
app.include_router(collections.router, prefix=f"{api_prefix}/collections", tags=["collections"])
app.include_router(book.router, prefix=f"{api_prefix}/book", tags=["book"])
app.include_router(save_book.router, prefix=f"{api_prefix}/save-book", tags=["book"])
app.include_router(
    book_layouts.router, prefix=f"{api_prefix}/book/layouts", tags=["book-layouts"]
)

# 编译产物以 /books/<文件名> 对外提供下载，上传图片走 /uploads
settings.ensure_dirs()
app.mount("/books", StaticFiles(directory=settings.books_dir), name="books")
app.mount("/uploads", StaticFiles(directory=settings.uploads_dir), name="uploads")


# 启动事件：配置日志并创建数据库表结构
@app.on_event("startup")
def on_startup() -> None:
    setup_logging(settings.log_level)
    init_db()
    logger.info("Chronicle started (env=%s, api_prefix=%r)", settings.app_env, api_prefix)
