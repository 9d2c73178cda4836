from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from chronicle.core.config import settings
from chronicle.core.schemas import BookCompilationOptions
from chronicle.models import Image, Post, Section
from chronicle.utils.file_store import image_url
from chronicle.utils.text import year_from_date


logger = logging.getLogger(__name__)

MANUSCRIPT_CHAPTER_TITLE = "Manuscript Content"
POSTS_CHAPTER_TITLE = "Historical Events"


@dataclass
class BookImage:
    url: str
    alt: str = ""
    caption: str = ""


@dataclass
class BookItem:
    """One post-shaped entry of the book, regardless of where it came from."""

    id: int
    title: str
    content: str
    excerpt: str
    date_of_event: str
    year_of_event: int
    slug: str
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    # 来源文章 id；由章节自身内容合成时为空
    post_id: Optional[int] = None
    categories: List[dict] = field(default_factory=list)
    tags: List[dict] = field(default_factory=list)
    images: List[BookImage] = field(default_factory=list)


@dataclass
class BookChapter:
    title: str
    posts: List[BookItem] = field(default_factory=list)


@dataclass
class TocEntry:
    title: str
    page: int
    level: int
    posts: int


@dataclass
class BookMetadata:
    title: str
    author: str
    generated_at: str
    total_posts: int
    subtitle: Optional[str] = None


@dataclass
class BookStructure:
    metadata: BookMetadata
    chapters: List[BookChapter]
    table_of_contents: List[TocEntry]


def _item_from_post(post: Post) -> BookItem:
    return BookItem(
        id=post.id,
        title=post.title,
        content=post.content or "",
        excerpt=post.excerpt or "",
        date_of_event=post.date_of_event,
        year_of_event=post.year_of_event,
        slug=post.slug,
        status=post.status,
        created_at=post.created_at,
        updated_at=post.updated_at,
        post_id=post.id,
    )


def _item_from_section(section: Section) -> BookItem:
    content = section.content or ""
    excerpt = (section.synopsis or content)[: settings.excerpt_length]
    event_date = section.date_of_event or date.today().isoformat()
    try:
        year = year_from_date(event_date)
    except ValueError:
        year = date.today().year
    return BookItem(
        id=section.id,
        title=section.title,
        content=content,
        excerpt=excerpt,
        date_of_event=event_date,
        year_of_event=year,
        slug=f"section-{section.id}",
        status="published",
        created_at=section.created_at,
        updated_at=section.updated_at or section.created_at,
    )


# 按分镜顺序读取书稿中的文档章节，关联文章优先
def _fetch_manuscript_items(db: Session, manuscript_id: int) -> list[BookItem]:
    rows = (
        db.query(Section, Post)
        .outerjoin(Post, Section.post_id == Post.id)
        .filter(Section.manuscript_id == manuscript_id, Section.type == "document")
        .order_by(Section.sort_order.asc(), Section.id.asc())
        .all()
    )
    return [
        _item_from_post(post) if post is not None else _item_from_section(section)
        for section, post in rows
    ]


def _fetch_published_items(db: Session) -> list[BookItem]:
    rows = (
        db.query(Post)
        .filter(Post.status == "published")
        .order_by(Post.created_at.desc(), Post.id.desc())
        .all()
    )
    return [_item_from_post(post) for post in rows]


def _attach_images(db: Session, items: list[BookItem]) -> None:
    post_ids = [item.post_id for item in items if item.post_id is not None]
    if not post_ids:
        return
    rows = (
        db.query(Image)
        .filter(Image.post_id.in_(post_ids))
        .order_by(Image.sort_order.asc(), Image.id.asc())
        .all()
    )
    by_post: dict[int, list[BookImage]] = {}
    for row in rows:
        by_post.setdefault(row.post_id, []).append(
            BookImage(url=image_url(row.filename), alt=row.alt or "", caption=row.caption or "")
        )
    for item in items:
        if item.post_id is not None:
            item.images = by_post.get(item.post_id, [])


# 读取待编译内容：指定书稿时取其章节，否则取全部已发布文章
def fetch_book_items(db: Session, options: BookCompilationOptions) -> list[BookItem]:
    if options.manuscript_id is not None:
        items = _fetch_manuscript_items(db, options.manuscript_id)
        source = f"manuscript {options.manuscript_id}"
    else:
        items = _fetch_published_items(db)
        source = "published posts"
    # sort_by 与状态/分类/标签/年份筛选仅被接收，不参与取数
    if options.include_images:
        _attach_images(db, items)
    logger.info("Fetched %d book items from %s", len(items), source)
    return items


def _table_of_contents(chapters: list[BookChapter]) -> list[TocEntry]:
    return [
        TocEntry(title=chapter.title, page=index + 1, level=1, posts=len(chapter.posts))
        for index, chapter in enumerate(chapters)
    ]


# 组织为单章结构并生成目录
def organize_into_chapters(
    items: list[BookItem], options: BookCompilationOptions
) -> BookStructure:
    chapter_title = (
        MANUSCRIPT_CHAPTER_TITLE if options.manuscript_id is not None else POSTS_CHAPTER_TITLE
    )
    chapters = [BookChapter(title=chapter_title, posts=list(items))]
    return BookStructure(
        metadata=BookMetadata(
            title=options.title,
            subtitle=options.subtitle,
            author=options.author,
            generated_at=datetime.utcnow().isoformat(),
            total_posts=len(items),
        ),
        chapters=chapters,
        table_of_contents=_table_of_contents(chapters),
    )
