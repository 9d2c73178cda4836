from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import OkResponse
from chronicle.models import Snapshot


router = APIRouter()


@router.delete("/{snapshot_id}", response_model=OkResponse)
def delete_snapshot(snapshot_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(Snapshot, snapshot_id)
    if not row:
        raise HTTPException(status_code=404, detail="Snapshot not found.")
    db.delete(row)
    db.commit()
    return OkResponse()
