from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chronicle.api.routes.collections import collection_to_out
from chronicle.api.routes.sections import (
    check_post_link,
    check_section_type,
    dump_json,
    section_to_out,
)
from chronicle.core.database import get_db
from chronicle.core.schemas import (
    CollectionCreate,
    CollectionOut,
    ManuscriptCreate,
    ManuscriptOut,
    ResearchCreate,
    ResearchOut,
    SectionCreate,
    SectionOut,
    WritingGoalCreate,
    WritingGoalOut,
    WritingSessionCreate,
    WritingSessionOut,
    WritingStats,
)
from chronicle.models import (
    Collection,
    CollectionItem,
    Manuscript,
    ResearchReference,
    Section,
    WritingGoal,
    WritingSession,
)
from chronicle.services.statistics import daily_writing_stats, record_writing_session
from chronicle.utils.text import count_words, parse_event_date


logger = logging.getLogger(__name__)

# API 路由器：书稿及其下属资源（章节、目标、资料、会话、合集）
router = APIRouter()


def _get_manuscript(db: Session, manuscript_id: int) -> Manuscript:
    row = db.get(Manuscript, manuscript_id)
    if not row:
        raise HTTPException(status_code=404, detail="Manuscript not found.")
    return row


@router.get("", response_model=list[ManuscriptOut])
def list_manuscripts(db: Session = Depends(get_db)) -> list[ManuscriptOut]:
    rows = db.query(Manuscript).order_by(Manuscript.updated_at.desc(), Manuscript.id.desc()).all()
    return [ManuscriptOut.model_validate(row) for row in rows]


@router.post("", response_model=ManuscriptOut)
def create_manuscript(payload: ManuscriptCreate, db: Session = Depends(get_db)) -> ManuscriptOut:
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Title is required.")
    now = datetime.utcnow()
    row = Manuscript(
        title=title,
        description=payload.description,
        target_word_count=payload.target_word_count,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info("Manuscript created: %s", row.id)
    return ManuscriptOut.model_validate(row)


@router.get("/{manuscript_id}", response_model=ManuscriptOut)
def get_manuscript(manuscript_id: int, db: Session = Depends(get_db)) -> ManuscriptOut:
    return ManuscriptOut.model_validate(_get_manuscript(db, manuscript_id))


# 章节按分镜顺序返回
@router.get("/{manuscript_id}/sections", response_model=list[SectionOut])
def list_sections(manuscript_id: int, db: Session = Depends(get_db)) -> list[SectionOut]:
    rows = (
        db.query(Section)
        .filter(Section.manuscript_id == manuscript_id)
        .order_by(Section.sort_order.asc(), Section.created_at.asc(), Section.id.asc())
        .all()
    )
    return [section_to_out(row) for row in rows]


@router.post("/{manuscript_id}/sections", response_model=SectionOut)
def create_manuscript_section(
    manuscript_id: int, payload: SectionCreate, db: Session = Depends(get_db)
) -> SectionOut:
    _get_manuscript(db, manuscript_id)
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=400, detail="Section title is required.")
    check_post_link(db, payload.post_id)

    now = datetime.utcnow()
    row = Section(
        manuscript_id=manuscript_id,
        post_id=payload.post_id,
        title=title,
        content=payload.content or "",
        synopsis=payload.synopsis or "",
        type=check_section_type(payload.type or "document"),
        status=payload.status or "draft",
        custom_icon=payload.custom_icon,
        label=payload.label,
        sort_order=payload.sort_order,
        word_count=count_words(payload.content),
        target_word_count=payload.target_word_count,
        include_in_compile=payload.include_in_compile,
        notes=payload.notes or "",
        keywords=payload.keywords or "",
        date_of_event=payload.date_of_event,
        extra_metadata=dump_json(payload.metadata),
        corkboard_position=dump_json(payload.corkboard_position),
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    logger.info(
        "Section created: %s (manuscript=%s post=%s type=%s)",
        row.id,
        manuscript_id,
        row.post_id,
        row.type,
    )
    return section_to_out(row)


@router.get("/{manuscript_id}/goals", response_model=list[WritingGoalOut])
def list_goals(manuscript_id: int, db: Session = Depends(get_db)) -> list[WritingGoalOut]:
    rows = (
        db.query(WritingGoal)
        .filter(WritingGoal.manuscript_id == manuscript_id)
        .order_by(WritingGoal.created_at.asc(), WritingGoal.id.asc())
        .all()
    )
    return [WritingGoalOut.model_validate(row) for row in rows]


@router.post("/{manuscript_id}/goals", response_model=WritingGoalOut)
def create_goal(
    manuscript_id: int, payload: WritingGoalCreate, db: Session = Depends(get_db)
) -> WritingGoalOut:
    if not payload.type:
        raise HTTPException(status_code=400, detail="Goal type is required.")
    _get_manuscript(db, manuscript_id)
    row = WritingGoal(
        manuscript_id=manuscript_id,
        section_id=payload.section_id,
        type=payload.type,
        target_words=payload.target_words,
        target_characters=payload.target_characters,
        target_time=payload.target_time,
        deadline=payload.deadline,
        created_at=datetime.utcnow(),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return WritingGoalOut.model_validate(row)


# 资料：置顶优先，其次按最近更新
@router.get("/{manuscript_id}/research", response_model=list[ResearchOut])
def list_research(manuscript_id: int, db: Session = Depends(get_db)) -> list[ResearchOut]:
    rows = (
        db.query(ResearchReference)
        .filter(ResearchReference.manuscript_id == manuscript_id)
        .order_by(
            ResearchReference.is_pinned.desc(),
            ResearchReference.updated_at.desc(),
            ResearchReference.id.desc(),
        )
        .all()
    )
    return [ResearchOut.model_validate(row) for row in rows]


@router.post("/{manuscript_id}/research", response_model=ResearchOut)
def create_research(
    manuscript_id: int, payload: ResearchCreate, db: Session = Depends(get_db)
) -> ResearchOut:
    title = payload.title.strip()
    content = payload.content.strip()
    if not title or not content:
        raise HTTPException(status_code=400, detail="Title and content are required.")
    _get_manuscript(db, manuscript_id)
    now = datetime.utcnow()
    row = ResearchReference(
        manuscript_id=manuscript_id,
        title=title,
        content=content,
        source=payload.source,
        type=payload.type,
        tags=payload.tags,
        created_at=now,
        updated_at=now,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return ResearchOut.model_validate(row)


@router.get("/{manuscript_id}/sessions", response_model=list[WritingSessionOut])
def list_sessions(
    manuscript_id: int,
    limit: int = Query(10, ge=1, le=200),
    db: Session = Depends(get_db),
) -> list[WritingSessionOut]:
    rows = (
        db.query(WritingSession)
        .filter(WritingSession.manuscript_id == manuscript_id)
        .order_by(WritingSession.started_at.desc(), WritingSession.id.desc())
        .limit(limit)
        .all()
    )
    return [WritingSessionOut.model_validate(row) for row in rows]


@router.post("/{manuscript_id}/sessions", response_model=WritingSessionOut)
def create_session(
    manuscript_id: int, payload: WritingSessionCreate, db: Session = Depends(get_db)
) -> WritingSessionOut:
    _get_manuscript(db, manuscript_id)
    row = record_writing_session(db, manuscript_id, payload)
    return WritingSessionOut.model_validate(row)


@router.get("/{manuscript_id}/stats", response_model=WritingStats)
def get_stats(
    manuscript_id: int,
    date: str | None = Query(None),
    db: Session = Depends(get_db),
) -> WritingStats:
    if not date:
        raise HTTPException(status_code=400, detail="Date parameter is required.")
    try:
        day = parse_event_date(date)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid date, expected YYYY-MM-DD.") from exc
    return daily_writing_stats(db, manuscript_id, day)


@router.get("/{manuscript_id}/collections", response_model=list[CollectionOut])
def list_collections(manuscript_id: int, db: Session = Depends(get_db)) -> list[CollectionOut]:
    rows = (
        db.query(Collection)
        .filter(Collection.manuscript_id == manuscript_id)
        .order_by(Collection.created_at.asc(), Collection.id.asc())
        .all()
    )
    if not rows:
        return []
    members: dict[int, list[int]] = {}
    items = (
        db.query(CollectionItem)
        .filter(CollectionItem.collection_id.in_([row.id for row in rows]))
        .order_by(CollectionItem.section_id.asc())
        .all()
    )
    for item in items:
        members.setdefault(item.collection_id, []).append(item.section_id)
    return [collection_to_out(row, members.get(row.id, [])) for row in rows]


@router.post("/{manuscript_id}/collections", response_model=CollectionOut)
def create_collection(
    manuscript_id: int, payload: CollectionCreate, db: Session = Depends(get_db)
) -> CollectionOut:
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Collection name is required.")
    _get_manuscript(db, manuscript_id)
    row = Collection(
        manuscript_id=manuscript_id,
        name=name,
        description=payload.description,
        is_smart_collection=payload.is_smart_collection,
        smart_filters=payload.smart_filters,
        created_at=datetime.utcnow(),
    )
    if payload.color:
        row.color = payload.color
    db.add(row)
    db.commit()
    db.refresh(row)
    return collection_to_out(row, [])

