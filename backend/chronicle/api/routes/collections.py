from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import CollectionItemCreate, CollectionOut, OkResponse
from chronicle.models import Collection, CollectionItem, Section


router = APIRouter()


def collection_to_out(row: Collection, section_ids: list[int]) -> CollectionOut:
    return CollectionOut(
        id=row.id,
        manuscript_id=row.manuscript_id,
        name=row.name,
        description=row.description,
        color=row.color,
        is_smart_collection=bool(row.is_smart_collection),
        smart_filters=row.smart_filters,
        created_at=row.created_at,
        section_ids=section_ids,
        section_count=len(section_ids),
    )


# 重复加入时返回提示而非报错
@router.post("/{collection_id}/items")
def add_collection_item(
    collection_id: int, payload: CollectionItemCreate, db: Session = Depends(get_db)
):
    if not payload.section_id:
        raise HTTPException(status_code=400, detail="Section ID is required.")
    if not db.get(Collection, collection_id):
        raise HTTPException(status_code=404, detail="Collection not found.")
    if not db.get(Section, payload.section_id):
        raise HTTPException(status_code=404, detail="Section not found.")

    existing = db.get(CollectionItem, (collection_id, payload.section_id))
    if existing:
        return JSONResponse({"message": "Section already in collection"})
    db.add(CollectionItem(collection_id=collection_id, section_id=payload.section_id))
    db.commit()
    return OkResponse()


@router.delete("/{collection_id}/items/{section_id}", response_model=OkResponse)
def remove_collection_item(
    collection_id: int, section_id: int, db: Session = Depends(get_db)
) -> OkResponse:
    db.query(CollectionItem).filter(
        CollectionItem.collection_id == collection_id,
        CollectionItem.section_id == section_id,
    ).delete(synchronize_session=False)
    db.commit()
    return OkResponse()
