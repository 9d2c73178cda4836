from __future__ import annotations

import json
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import (
    ManuscriptOut,
    SaveBookRequest,
    SaveBookResponse,
    SavedBookResponse,
)
from chronicle.models import Manuscript, Section


logger = logging.getLogger(__name__)

router = APIRouter()

COMPILED_CONTENT_TYPE = "compiled-book"
# 归档章节排在最后
COMPILED_SECTION_SORT_ORDER = 9999


# 保存编辑器中定稿的书籍内容：写入书稿 settings，并追加一个不参与编译的归档章节
@router.post("", response_model=SaveBookResponse)
def save_book(payload: SaveBookRequest, db: Session = Depends(get_db)) -> SaveBookResponse:
    if not payload.manuscript_id or not payload.title or not payload.content:
        raise HTTPException(
            status_code=400, detail="Missing required fields: manuscriptId, title, content"
        )
    manuscript = db.get(Manuscript, payload.manuscript_id)
    if not manuscript:
        raise HTTPException(status_code=404, detail="Manuscript not found")

    now = datetime.utcnow()
    saved_at = now.isoformat()
    word_count = payload.word_count or 0
    manuscript.title = payload.title
    manuscript.word_count = word_count
    manuscript.status = "completed"
    manuscript.updated_at = now
    manuscript.settings = json.dumps(
        {
            "compiledBookContent": payload.content,
            "lastCompiled": saved_at,
            "contentType": COMPILED_CONTENT_TYPE,
        },
        ensure_ascii=False,
    )
    db.add(
        Section(
            manuscript_id=manuscript.id,
            title=f"{payload.title} - Compiled Book",
            content=payload.content,
            synopsis="Final compiled book content",
            type="document",
            sort_order=COMPILED_SECTION_SORT_ORDER,
            word_count=word_count,
            include_in_compile=False,
            notes="Auto-generated compiled book section",
            status="completed",
            custom_icon="📖",
            keywords="compiled, book, final",
            created_at=now,
            updated_at=now,
        )
    )
    db.commit()
    db.refresh(manuscript)
    logger.info("Compiled book saved for manuscript %s (%d words)", manuscript.id, word_count)
    return SaveBookResponse(
        message="Book saved successfully",
        manuscript=ManuscriptOut.model_validate(manuscript),
        saved_at=saved_at,
    )


@router.get("", response_model=SavedBookResponse)
def get_saved_book(
    manuscript_id: int | None = Query(None, alias="manuscriptId"),
    db: Session = Depends(get_db),
) -> SavedBookResponse:
    if not manuscript_id:
        raise HTTPException(status_code=400, detail="manuscriptId parameter is required")
    manuscript = db.get(Manuscript, manuscript_id)
    if not manuscript:
        raise HTTPException(status_code=404, detail="Manuscript not found")

    content = None
    last_compiled = None
    if manuscript.settings:
        try:
            stored = json.loads(manuscript.settings)
        except json.JSONDecodeError as exc:
            logger.warning("Could not parse settings of manuscript %s: %s", manuscript.id, exc)
            stored = {}
        if isinstance(stored, dict):
            content = stored.get("compiledBookContent") or None
            last_compiled = stored.get("lastCompiled") or None

    return SavedBookResponse(
        manuscript=ManuscriptOut.model_validate(manuscript),
        saved_book_content=content,
        last_compiled=last_compiled,
        has_saved_content=bool(content),
    )
