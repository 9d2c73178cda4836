from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from chronicle.core.config import settings


# 所有内容表的声明基类
class Base(DeclarativeBase):
    pass


# 默认使用本地 SQLite 文件；database_url 用于外部数据库
def _build_engine():
    if settings.database_url:
        return create_engine(settings.database_url, future=True, pool_pre_ping=True)
    settings.ensure_dirs()
    return create_engine(
        f"sqlite:///{settings.sqlite_path}",
        connect_args={"check_same_thread": False},
        future=True,
    )


engine = _build_engine()
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


# SQLite 默认不启用外键，ON DELETE SET NULL / CASCADE 依赖它
@event.listens_for(engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    if engine.dialect.name != "sqlite":
        return
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# 建表（已存在的表不做迁移）
def init_db() -> None:
    from chronicle.models import (  # noqa: F401
        post,
        taxonomy,
        image,
        manuscript,
        section,
        comment,
        snapshot,
        collection,
        writing,
        research,
    )

    Base.metadata.create_all(bind=engine)


# 每个请求一个会话
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
