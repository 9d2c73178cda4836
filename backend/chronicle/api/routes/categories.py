from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import CategoryCreate, CategoryOut, OkResponse
from chronicle.models import Category, PostCategory
from chronicle.utils.text import generate_slug


router = APIRouter()


@router.get("", response_model=list[CategoryOut])
def list_categories(db: Session = Depends(get_db)) -> list[CategoryOut]:
    rows = db.query(Category).order_by(Category.type.asc(), Category.name.asc()).all()
    return [CategoryOut.model_validate(row) for row in rows]


@router.post("", response_model=CategoryOut, status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)) -> CategoryOut:
    name = payload.name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Category name is required.")
    row = Category(
        name=name,
        slug=(payload.slug or "").strip() or generate_slug(name),
        description=payload.description,
        type=payload.type,
    )
    if payload.color:
        row.color = payload.color
    db.add(row)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail="Category already exists.") from exc
    db.refresh(row)
    return CategoryOut.model_validate(row)


@router.delete("/{category_id}", response_model=OkResponse)
def delete_category(category_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(Category, category_id)
    if not row:
        raise HTTPException(status_code=404, detail="Category not found.")
    db.query(PostCategory).filter(PostCategory.category_id == category_id).delete(
        synchronize_session=False
    )
    db.delete(row)
    db.commit()
    return OkResponse()
