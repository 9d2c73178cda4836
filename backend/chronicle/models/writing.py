from __future__ import annotations

from datetime import datetime
from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from chronicle.core.database import Base


class WritingSession(Base):
    __tablename__ = "writing_sessions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    manuscript_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("manuscripts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    section_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sections.id", ondelete="CASCADE"), nullable=True
    )
    words_written: Mapped[int] = mapped_column(Integer, nullable=False)
    characters_written: Mapped[int] = mapped_column(Integer, nullable=False)
    # 分钟
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False)
    started_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)
    ended_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    session_goal: Mapped[int | None] = mapped_column(Integer, nullable=True)
    goal_achieved: Mapped[bool] = mapped_column(Boolean, default=False)


class WritingGoal(Base):
    __tablename__ = "writing_goals"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    manuscript_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("manuscripts.id", ondelete="CASCADE"), index=True, nullable=False
    )
    # 为空表示整部书稿的目标
    section_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("sections.id", ondelete="CASCADE"), nullable=True
    )
    # daily / weekly / monthly / total / session
    type: Mapped[str] = mapped_column(String, nullable=False)
    target_words: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_characters: Mapped[int | None] = mapped_column(Integer, nullable=True)
    target_time: Mapped[int | None] = mapped_column(Integer, nullable=True)
    deadline: Mapped[str | None] = mapped_column(String, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
