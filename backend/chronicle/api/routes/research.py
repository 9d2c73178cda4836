from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import OkResponse, ResearchOut, ResearchUpdate
from chronicle.models import ResearchReference


router = APIRouter()


@router.put("/{reference_id}", response_model=ResearchOut)
def update_research(
    reference_id: int, payload: ResearchUpdate, db: Session = Depends(get_db)
) -> ResearchOut:
    row = db.get(ResearchReference, reference_id)
    if not row:
        raise HTTPException(status_code=404, detail="Research reference not found.")
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, key, value)
    row.updated_at = datetime.utcnow()
    db.commit()
    db.refresh(row)
    return ResearchOut.model_validate(row)


@router.delete("/{reference_id}", response_model=OkResponse)
def delete_research(reference_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(ResearchReference, reference_id)
    if not row:
        raise HTTPException(status_code=404, detail="Research reference not found.")
    db.delete(row)
    db.commit()
    return OkResponse()
