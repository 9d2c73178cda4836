from __future__ import annotations

import logging
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from chronicle.core.database import get_db
from chronicle.core.schemas import (
    CategoryOut,
    ImageOut,
    OkResponse,
    PostCreate,
    PostDetail,
    PostOut,
    PostUpdate,
    TagOut,
)
from chronicle.models import Category, Image, Post, PostCategory, PostTag, Section, Tag
from chronicle.utils.file_store import image_url
from chronicle.utils.text import generate_slug, year_from_date


logger = logging.getLogger(__name__)

# API 路由器：历史事件文章
router = APIRouter()


def _unique_slug(db: Session, title: str) -> str:
    base = generate_slug(title) or "post"
    slug = base
    suffix = 2
    while db.query(Post.id).filter(Post.slug == slug).first():
        slug = f"{base}-{suffix}"
        suffix += 1
    return slug


# 引用不存在的分类或标签时返回 400
def _check_ids_exist(db: Session, model, ids: list[int] | None, label: str) -> None:
    if not ids:
        return
    wanted = set(ids)
    found = {row_id for (row_id,) in db.query(model.id).filter(model.id.in_(wanted)).all()}
    missing = sorted(wanted - found)
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown {label} id(s): {', '.join(str(value) for value in missing)}",
        )


def _replace_links(
    db: Session,
    post_id: int,
    category_ids: list[int] | None,
    tag_ids: list[int] | None,
) -> None:
    _check_ids_exist(db, Category, category_ids, "category")
    _check_ids_exist(db, Tag, tag_ids, "tag")
    if category_ids is not None:
        db.query(PostCategory).filter(PostCategory.post_id == post_id).delete(
            synchronize_session=False
        )
        for category_id in dict.fromkeys(category_ids):
            db.add(PostCategory(post_id=post_id, category_id=category_id))
    if tag_ids is not None:
        db.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
        for tag_id in dict.fromkeys(tag_ids):
            db.add(PostTag(post_id=post_id, tag_id=tag_id))


# 文章列表：按标题搜索、按状态筛选
@router.get("", response_model=list[PostOut])
def list_posts(
    search: str | None = Query(None),
    status: str | None = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
) -> list[PostOut]:
    query = db.query(Post)
    if search:
        query = query.filter(Post.title.like(f"%{search}%"))
    if status and status != "all":
        query = query.filter(Post.status == status)
    rows = query.order_by(Post.updated_at.desc(), Post.id.desc()).offset(offset).limit(limit).all()
    return [PostOut.model_validate(row) for row in rows]


# 创建文章：生成 slug，事件年份仅在创建时推导
@router.post("", response_model=PostOut, status_code=201)
def create_post(payload: PostCreate, db: Session = Depends(get_db)) -> PostOut:
    try:
        year = year_from_date(payload.date_of_event)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail="Invalid dateOfEvent, expected YYYY-MM-DD.") from exc

    now = datetime.utcnow()
    post = Post(
        title=payload.title,
        content=payload.content,
        excerpt=payload.excerpt,
        date_of_event=payload.date_of_event,
        year_of_event=year,
        slug=_unique_slug(db, payload.title),
        status=payload.status,
        created_at=now,
        updated_at=now,
    )
    db.add(post)
    db.flush()
    _replace_links(db, post.id, payload.category_ids, payload.tag_ids)
    db.commit()
    db.refresh(post)
    logger.info("Post created: %s (%s)", post.id, post.slug)
    return PostOut.model_validate(post)


# 文章详情：含分类、标签与图片
@router.get("/{post_id}", response_model=PostDetail)
def get_post(post_id: int, db: Session = Depends(get_db)) -> PostDetail:
    post = db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")

    categories = (
        db.query(Category)
        .join(PostCategory, PostCategory.category_id == Category.id)
        .filter(PostCategory.post_id == post_id)
        .order_by(Category.name.asc())
        .all()
    )
    tags = (
        db.query(Tag)
        .join(PostTag, PostTag.tag_id == Tag.id)
        .filter(PostTag.post_id == post_id)
        .order_by(Tag.name.asc())
        .all()
    )
    images = (
        db.query(Image)
        .filter(Image.post_id == post_id)
        .order_by(Image.sort_order.asc(), Image.id.asc())
        .all()
    )
    detail = PostDetail.model_validate(post)
    detail.categories = [CategoryOut.model_validate(row) for row in categories]
    detail.tags = [TagOut.model_validate(row) for row in tags]
    detail.images = [
        ImageOut.model_validate(row).model_copy(update={"url": image_url(row.filename)})
        for row in images
    ]
    return detail


def _apply_update(db: Session, post_id: int, payload: PostUpdate) -> Post:
    post = db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")
    changes = payload.model_dump(exclude_unset=True, exclude={"category_ids", "tag_ids"})
    for key, value in changes.items():
        if value is None:
            continue
        setattr(post, key, value)
    # slug 与事件年份只在创建时生成
    post.updated_at = datetime.utcnow()
    _replace_links(db, post_id, payload.category_ids, payload.tag_ids)
    db.commit()
    db.refresh(post)
    return post


@router.put("/{post_id}", response_model=PostOut)
def update_post(post_id: int, payload: PostUpdate, db: Session = Depends(get_db)) -> PostOut:
    return PostOut.model_validate(_apply_update(db, post_id, payload))


# 局部更新（如切换发布状态），不改动分类与标签
@router.patch("/{post_id}", response_model=PostOut)
def patch_post(post_id: int, payload: PostUpdate, db: Session = Depends(get_db)) -> PostOut:
    payload = payload.model_copy(update={"category_ids": None, "tag_ids": None})
    return PostOut.model_validate(_apply_update(db, post_id, payload))


# 删除文章：关联章节只解除链接，不随之删除
@router.delete("/{post_id}", response_model=OkResponse)
def delete_post(post_id: int, db: Session = Depends(get_db)) -> OkResponse:
    post = db.get(Post, post_id)
    if not post:
        raise HTTPException(status_code=404, detail="Post not found.")

    db.query(Section).filter(Section.post_id == post_id).update(
        {"post_id": None}, synchronize_session=False
    )
    db.query(PostCategory).filter(PostCategory.post_id == post_id).delete(
        synchronize_session=False
    )
    db.query(PostTag).filter(PostTag.post_id == post_id).delete(synchronize_session=False)
    db.query(Image).filter(Image.post_id == post_id).delete(synchronize_session=False)
    db.delete(post)
    db.commit()
    return OkResponse()
