"""SQLAlchemy ORM models for PomoKeeper."""

from sqlalchemy import Column, Integer, String, Boolean, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class KeyValueEntry(Base):
    """One JSON-encoded value in the key-value store."""

    __tablename__ = "kv_entries"

    key = Column(String(128), primary_key=True)
    value = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<KeyValueEntry key={self.key}>"


class SessionRecordRow(Base):
    """A finished or abandoned session as handed over by the timer."""

    __tablename__ = "session_records"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True)
    task_id = Column(String(128), nullable=True)
    session_type = Column(String(20), nullable=False)  # work | short-break | long-break
    started_at = Column(String(40), nullable=False)    # ISO-8601
    ended_at = Column(String(40), nullable=False)
    duration_seconds = Column(Integer, nullable=False, default=0)
    interrupted = Column(Boolean, nullable=False, default=False)

    def __repr__(self) -> str:
        return (
            f"<SessionRecordRow id={self.id} type={self.session_type} "
            f"interrupted={self.interrupted}>"
        )
