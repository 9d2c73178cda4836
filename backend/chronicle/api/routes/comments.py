from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import CommentOut, CommentUpdate, OkResponse
from chronicle.models import Comment


router = APIRouter()


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(
    comment_id: int, payload: CommentUpdate, db: Session = Depends(get_db)
) -> CommentOut:
    row = db.get(Comment, comment_id)
    if not row:
        raise HTTPException(status_code=404, detail="Comment not found.")
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, key, value)
    row.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(row)
    return CommentOut.model_validate(row)


@router.delete("/{comment_id}", response_model=OkResponse)
def delete_comment(comment_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(Comment, comment_id)
    if not row:
        raise HTTPException(status_code=404, detail="Comment not found.")
    db.delete(row)
    db.commit()
    return OkResponse()
