from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import ImageCreate, ImageOut, ImageUpdate, OkResponse
from chronicle.models import Image, Post
from chronicle.utils.file_store import image_url


# 图片元数据（文件本身由上传服务存放在 uploads 目录）
router = APIRouter()


def _to_out(row: Image) -> ImageOut:
    out = ImageOut.model_validate(row)
    out.url = image_url(row.filename)
    return out


@router.get("", response_model=list[ImageOut])
def list_images(
    post_id: int | None = Query(None, alias="postId"),
    db: Session = Depends(get_db),
) -> list[ImageOut]:
    if post_id is None:
        raise HTTPException(status_code=400, detail="Post ID is required.")
    rows = (
        db.query(Image)
        .filter(Image.post_id == post_id)
        .order_by(Image.sort_order.asc(), Image.id.asc())
        .all()
    )
    return [_to_out(row) for row in rows]


@router.post("", response_model=ImageOut, status_code=201)
def create_image(payload: ImageCreate, db: Session = Depends(get_db)) -> ImageOut:
    if not db.get(Post, payload.post_id):
        raise HTTPException(status_code=404, detail="Post not found.")
    # 新图片排在末尾
    count = db.query(Image).filter(Image.post_id == payload.post_id).count()
    row = Image(**payload.model_dump(), sort_order=count)
    db.add(row)
    db.commit()
    db.refresh(row)
    return _to_out(row)


@router.patch("/{image_id}", response_model=ImageOut)
def update_image(image_id: int, payload: ImageUpdate, db: Session = Depends(get_db)) -> ImageOut:
    row = db.get(Image, image_id)
    if not row:
        raise HTTPException(status_code=404, detail="Image not found.")
    for key, value in payload.model_dump(exclude_unset=True).items():
        if value is not None:
            setattr(row, key, value)
    db.commit()
    db.refresh(row)
    return _to_out(row)


@router.delete("/{image_id}", response_model=OkResponse)
def delete_image(image_id: int, db: Session = Depends(get_db)) -> OkResponse:
    row = db.get(Image, image_id)
    if not row:
        raise HTTPException(status_code=404, detail="Image not found.")
    db.delete(row)
    db.commit()
    return OkResponse()
