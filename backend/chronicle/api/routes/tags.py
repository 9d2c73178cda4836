from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import OkResponse, TagCreate, TagOut
from chronicle.models import PostTag, Tag
from chronicle.utils.text import generate_slug


router = APIRouter()


@router.get("", response_model=list[TagOut])
def list_tags(db: Session = Depends(get_db)) -> list[TagOut]:
    rows = db.query(Tag).order_by(Tag.name.asc()).all()
    return [TagOut.model_validate(row) for row in rows]


@router.post("", response_model=TagOut, status_code=201)
def create_tag(payload: TagCreate, db: Session = Depends(get_db)) -> TagOut:
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Tag name is required.")
    row = Tag(
        name=name,
        slug=(payload.slug or "").strip() or generate_slug(name),
        description=payload.description,
    )
    if payload.color:
        row.color = payload.color
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail="Tag already exists.") from exc
    db.refresh(row)
    return TagOut.model_validate(row)


@router.delete("/{tag_id}", response_model=OkResponse)
def delete_tag(tag_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(Tag, tag_id)
    if not row:
        raise HTTPException(status_code=404, detail="Tag not found.")
    db.query(PostTag).filter(PostTag.tag_id == tag_id).delete(synchronize_session=False)
    db.delete(row)
    db.commit()
    return OkResponse()
