from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chronicle.core.book_layouts import get_page_geometry, normalize_template
from chronicle.core.database import get_db
from chronicle.core.schemas import (
    BookCompilationOptions,
    CompiledBookMetadata,
    CompiledOptionsEcho,
    CompileResponse,
    CompileStatusResponse,
)
from chronicle.services.book_compiler import fetch_book_items, organize_into_chapters
from chronicle.services.book_renderer import render_book_html
from chronicle.services.pdf_service import write_book_pdf


logger = logging.getLogger(__name__)

# API 路由器：书籍编译
router = APIRouter()


# 同步编译：读取 -> 分章 -> 渲染 HTML -> 生成 PDF
@router.post("/compile", response_model=CompileResponse)
def compile_book(options: BookCompilationOptions, db: Session = Depends(get_db)) -> CompileResponse:
    if not options.title.strip() or not options.author.strip():
        raise HTTPException(status_code=400, detail="Title and author are required")

    items = fetch_book_items(db, options)
    if not items:
        raise HTTPException(status_code=400, detail="No posts found matching the specified criteria")

    try:
        structure = organize_into_chapters(items, options)
        html = render_book_html(structure, options)
        logger.info("Rendered book HTML: %d chars", len(html))
        filename, file_size = write_book_pdf(html, options.title)
    except Exception as exc:
        logger.exception("Book compilation failed: title=%s", options.title)
        raise HTTPException(
            status_code=500, detail="Failed to compile book. Please try again."
        ) from exc

    meta = structure.metadata
    logger.info(
        "Book compiled: %s (%d items, %s, %d bytes)",
        filename,
        meta.total_posts,
        get_page_geometry(options.page_size).key,
        file_size,
    )
    return CompileResponse(
        download_url=f"/books/{filename}",
        metadata=CompiledBookMetadata(
            title=meta.title,
            subtitle=meta.subtitle,
            author=meta.author,
            generated_at=meta.generated_at,
            total_posts=meta.total_posts,
            filename=filename,
            file_size=file_size,
            chapters=len(structure.chapters),
            options=CompiledOptionsEcho(
                template=normalize_template(options.template),
                page_size=get_page_geometry(options.page_size).key,
                font_size=options.font_size,
                include_images=options.include_images,
            ),
        ),
    )


# 预留给异步编译的进度查询；当前编译同步完成
@router.get("/compile", response_model=CompileStatusResponse)
def compile_status(job_id: str | None = Query(None, alias="jobId")) -> CompileStatusResponse:
    if not job_id:
        raise HTTPException(status_code=400, detail="Job ID required")
    return CompileStatusResponse(stage="complete", progress=100, message="Compilation complete")
