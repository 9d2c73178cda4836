from __future__ import annotations

import json
import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import func
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import (
    CommentCreate,
    CommentOut,
    OkResponse,
    SectionOut,
    SectionQuickCreate,
    SectionUpdate,
    SnapshotCreate,
    SnapshotOut,
)
from chronicle.models import Comment, Manuscript, Post, Section, Snapshot
from chronicle.models.section import SECTION_TYPES
from chronicle.utils.text import count_words


logger = logging.getLogger(__name__)

router = APIRouter()


def section_to_out(row: Section) -> SectionOut:
    return SectionOut(
        id=row.id,
        manuscript_id=row.manuscript_id,
        parent_id=row.parent_id,
        post_id=row.post_id,
        title=row.title,
        content=row.content,
        synopsis=row.synopsis,
        type=row.type,
        sort_order=row.sort_order or 0,
        word_count=row.word_count or 0,
        target_word_count=row.target_word_count,
        include_in_compile=bool(row.include_in_compile),
        notes=row.notes,
        status=row.status,
        label=row.label,
        keywords=row.keywords,
        custom_icon=row.custom_icon,
        date_of_event=row.date_of_event,
        metadata=row.extra_metadata,
        corkboard_position=row.corkboard_position,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def dump_json(value: dict | None) -> str | None:
    return json.dumps(value, ensure_ascii=False) if value is not None else None


def check_section_type(value: str) -> str:
    if value not in SECTION_TYPES:
        raise HTTPException(status_code=400, detail=f"Unknown section type: {value}")
    return value


# 章节关联的文章必须存在
def check_post_link(db: Session, post_id: int | None) -> None:
    if post_id is not None and not db.get(Post, post_id):
        raise HTTPException(status_code=400, detail=f"Unknown post id: {post_id}")


# 这些列不可为空，更新时忽略显式 null
_REQUIRED_FIELDS = {"title", "type", "sort_order", "word_count", "include_in_compile"}


def _get_section(db: Session, section_id: int) -> Section:
    row = db.get(Section, section_id)
    if not row:
        raise HTTPException(status_code=404, detail="Section not found.")
    return row


# 快速新建空白章节（侧边栏“新建”）
@router.post("", response_model=SectionOut)
def create_section(payload: SectionQuickCreate, db: Session = Depends(get_db)) -> SectionOut:
    title = (payload.title or "").strip()
    if not payload.manuscript_id or not title:
        raise HTTPException(status_code=400, detail="Manuscript ID and title are required.")
    if not db.get(Manuscript, payload.manuscript_id):
        raise HTTPException(status_code=404, detail="Manuscript not found.")

    now = datetime.utcnow()
    row = Section(
        manuscript_id=payload.manuscript_id,
        parent_id=payload.parent_id,
        title=title,
        type=check_section_type(payload.type or "document"),
        content="",
        word_count=0,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return section_to_out(row)


@router.put("/{section_id}", response_model=SectionOut)
def update_section(
    section_id: int, payload: SectionUpdate, db: Session = Depends(get_db)
) -> SectionOut:
    row = _get_section(db, section_id)
    changes = {
        key: value
        for key, value in payload.model_dump(exclude_unset=True).items()
        if value is not None or key not in _REQUIRED_FIELDS
    }
    if "title" in changes:
        changes["title"] = changes["title"].strip()
        if not changes["title"]:
            raise HTTPException(status_code=400, detail="Section title is required.")
    if "type" in changes:
        check_section_type(changes["type"])
    if "post_id" in changes:
        check_post_link(db, changes["post_id"])
    for key, value in changes.items():
        setattr(row, key, value)
    # 正文变更且未显式给出字数时重新统计
    if "content" in changes and "word_count" not in changes:
        row.word_count = count_words(row.content)
    row.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(row)
    return section_to_out(row)


@router.delete("/{section_id}", response_model=OkResponse)
def delete_section(section_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = _get_section(db, section_id)
    db.delete(row)
    db.commit()
    return OkResponse()


@router.get("/{section_id}/comments", response_model=list[CommentOut])
def list_comments(section_id: int, db: Session = Depends(get_db)) -> list[CommentOut]:
    rows = (
        db.query(Comment)
        .filter(Comment.section_id == section_id)
        .order_by(Comment.created_at.asc(), Comment.id.asc())
        .all()
    )
    return [CommentOut.model_validate(row) for row in rows]


@router.post("/{section_id}/comments", response_model=CommentOut)
def create_comment(
    section_id: int, payload: CommentCreate, db: Session = Depends(get_db)
) -> CommentOut:
    content = payload.content.strip()
    if not content:
        raise HTTPException(status_code=400, detail="Comment content is required.")
    _get_section(db, section_id)

    now = datetime.utcnow()
    row = Comment(
        section_id=section_id,
        manuscript_id=payload.manuscript_id,
        content=content,
        position=payload.position,
        length=payload.length,
        type=payload.type,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return CommentOut.model_validate(row)


# 版本快照：新快照版本号 = 当前最大版本 + 1
@router.get("/{section_id}/snapshots", response_model=list[SnapshotOut])
def list_snapshots(section_id: int, db: Session = Depends(get_db)) -> list[SnapshotOut]:
    rows = (
        db.query(Snapshot)
        .filter(Snapshot.section_id == section_id)
        .order_by(Snapshot.created_at.desc(), Snapshot.id.desc())
        .all()
    )
    return [SnapshotOut.model_validate(row) for row in rows]


@router.post("/{section_id}/snapshots", response_model=SnapshotOut)
def create_snapshot(
    section_id: int, payload: SnapshotCreate, db: Session = Depends(get_db)
) -> SnapshotOut:
    title = payload.title.strip()
    if not title or not payload.content:
        raise HTTPException(status_code=400, detail="Title and content are required.")
    _get_section(db, section_id)

    latest = (
        db.query(func.max(Snapshot.version)).filter(Snapshot.section_id == section_id).scalar()
    )
    row = Snapshot(
        section_id=section_id,
        manuscript_id=payload.manuscript_id,
        title=title,
        content=payload.content,
        word_count=payload.word_count,
        version=(latest or 0) + 1,
        description=payload.description,
        is_automatic=payload.is_automatic,
        created_at=datetime.utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Snapshot v%d saved for section %s", row.version, section_id)
    return SnapshotOut.model_validate(row)
