from __future__ import annotations

from datetime import date, datetime, time, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from chronicle.core.schemas import WritingSessionCreate, WritingStats
from chronicle.models import WritingSession


# 汇总某一天开始的写作会话
def daily_writing_stats(db: Session, manuscript_id: int, day: date) -> WritingStats:
    start = datetime.combine(day, time.min)
    end = start + timedelta(days=1)
    row = (
        db.query(
            func.coalesce(func.sum(WritingSession.words_written), 0),
            func.coalesce(func.sum(WritingSession.characters_written), 0),
            func.coalesce(func.sum(WritingSession.time_spent), 0),
            func.count(WritingSession.id),
        )
        .filter(
            WritingSession.manuscript_id == manuscript_id,
            WritingSession.started_at >= start,
            WritingSession.started_at < end,
        )
        .first()
    )
    if not row:
        return WritingStats()
    return WritingStats(
        words_written=int(row[0] or 0),
        characters_written=int(row[1] or 0),
        time_spent=int(row[2] or 0),
        sessions_count=int(row[3] or 0),
    )


def record_writing_session(
    db: Session, manuscript_id: int, payload: WritingSessionCreate
) -> WritingSession:
    goal_achieved = (
        payload.words_written >= payload.session_goal if payload.session_goal else False
    )
    row = WritingSession(
        manuscript_id=manuscript_id,
        section_id=payload.section_id,
        words_written=payload.words_written,
        characters_written=payload.characters_written,
        time_spent=payload.time_spent,
        started_at=payload.started_at,
        ended_at=payload.ended_at,
        session_goal=payload.session_goal,
        goal_achieved=goal_achieved,
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row
