"""SQLAlchemy ORM models -- PostgreSQL schema definition."""
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String,
)
from sqlalchemy.orm import DeclarativeBase

# SQLite only autoincrements INTEGER PRIMARY KEY.
_RecordId = BigInteger().with_variant(Integer, "sqlite")


def _utcnow():
    return datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Accounts (owned by the account service; only the id is read here)
# ---------------------------------------------------------------------------

class AccountModel(Base):
    __tablename__ = "accounts"

    id = Column(String(12), primary_key=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


# ---------------------------------------------------------------------------
# Puzzle records (immutable completion events)
# ---------------------------------------------------------------------------

class PuzzleRecordModel(Base):
    __tablename__ = "puzzle_records"
    __table_args__ = (
        CheckConstraint("time_taken >= 0 AND time_taken <= 86400", name="ck_puzzle_records_time"),
        CheckConstraint("hint_count >= 0 AND hint_count <= 100", name="ck_puzzle_records_hints"),
        Index("idx_puzzle_records_type_difficulty", "puzzle_type", "difficulty"),
        Index("idx_puzzle_records_account_type", "account_id", "puzzle_type"),
        Index("idx_puzzle_records_account_completed", "account_id", "completed_at"),
    )

    record_id = Column(_RecordId, primary_key=True, autoincrement=True)
    account_id = Column(
        String(12), ForeignKey("accounts.id", ondelete="CASCADE"), nullable=False, index=True,
    )
    puzzle_type = Column(String(50), nullable=False, index=True)
    difficulty = Column(String(20), nullable=False, index=True)
    time_taken = Column(Integer, nullable=False, index=True)
    hint_count = Column(Integer, nullable=False, default=0, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
