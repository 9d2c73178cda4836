from __future__ import annotations

from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chronicle.core.database import Base


SECTION_TYPES = (
    "folder",
    "document",
    "note",
    "research",
    "character",
    "location",
    "scene",
    "historical_event",
)


class Section(Base):
    __tablename__ = "sections"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    manuscript_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("manuscripts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    parent_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # 文章被删除时置空，章节保留自身的标题与正文副本
    post_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("posts.id", ondelete="SET NULL"), index=True, nullable=True
    )
    title: Mapped[str] = mapped_column(String, nullable=False)
    content: Mapped[str | None] = mapped_column(Text, default="")
    synopsis: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String, default="document")
    sort_order: Mapped[int] = mapped_column(Integer, default=0)
    word_count: Mapped[int] = mapped_column(Integer, default=0)
    target_word_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    include_in_compile: Mapped[bool] = mapped_column(Boolean, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str | None] = mapped_column(String, default="draft")
    label: Mapped[str | None] = mapped_column(String, nullable=True)
    keywords: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_icon: Mapped[str | None] = mapped_column(String, nullable=True)
    date_of_event: Mapped[str | None] = mapped_column(String, nullable=True)
    # "metadata" 是 Declarative 保留名
    extra_metadata: Mapped[str | None] = mapped_column("metadata", Text, nullable=True)
    corkboard_position: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
