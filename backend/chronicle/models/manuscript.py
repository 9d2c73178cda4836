from __future__ import annotations

from datetime import datetime
from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chronicle.core.database import Base


class Manuscript(Base):
    __tablename__ = "manuscripts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    # draft / in_progress / completed
    status: Mapped[str] = mapped_column(String, default="draft")
    word_count: Mapped[int] = mapped_column(Integer, default=0)
    target_word_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    # 自由格式 JSON（主题、排版偏好、最近一次编译的书籍内容）
    settings: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
