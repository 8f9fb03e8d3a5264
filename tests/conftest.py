"""
Shared pytest fixtures for the Puzzlebase test suite.

Strategy:
- Domain and engine tests: pure in-memory, zero I/O.
- Service/API tests: JSON-file stores in a per-test tmp directory.
- SQL repository tests: in-memory SQLite engine through the same models.
DATABASE_URL is cleared so nothing touches a real database.
"""
import os
from datetime import datetime, timedelta, timezone

import pytest

os.environ.pop("DATABASE_URL", None)

from puzzlebase.domain.record import CompletionCandidate, CompletionRecord


ACCOUNT_A = "ABC123DEF456"
ACCOUNT_B = "XYZ789GHI012"
ACCOUNT_C = "QWE456RTY789"
UNKNOWN_ACCOUNT = "NOPE00000000"

BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Builders (reusable across many test modules)
# ---------------------------------------------------------------------------

def make_record(
    record_id=1,
    account_id=ACCOUNT_A,
    puzzle_type="chess_puzzle",
    difficulty="easy",
    time_taken=120,
    hint_count=0,
    completed_at=None,
) -> CompletionRecord:
    return CompletionRecord(
        record_id=record_id,
        account_id=account_id,
        puzzle_type=puzzle_type,
        difficulty=difficulty,
        time_taken=time_taken,
        hint_count=hint_count,
        completed_at=completed_at or BASE_TIME + timedelta(minutes=record_id),
    )


def make_candidate(
    account_id=ACCOUNT_A,
    puzzle_type="chess_puzzle",
    difficulty="easy",
    time_taken=120,
    hint_count=0,
    completed_at=BASE_TIME,
) -> CompletionCandidate:
    return CompletionCandidate(
        account_id=account_id,
        puzzle_type=puzzle_type,
        difficulty=difficulty,
        time_taken=time_taken,
        hint_count=hint_count,
        completed_at=completed_at,
    )


# ---------------------------------------------------------------------------
# Stores and service
# ---------------------------------------------------------------------------

@pytest.fixture
def record_repo(tmp_path):
    from puzzlebase.infrastructure.repositories.record_repository import JsonRecordRepository
    return JsonRecordRepository(data_path=str(tmp_path / "records.json"))


@pytest.fixture
def account_repo(tmp_path):
    from puzzlebase.infrastructure.repositories.account_repository import JsonAccountRepository
    repo = JsonAccountRepository(data_path=str(tmp_path / "accounts.json"))
    for account_id in (ACCOUNT_A, ACCOUNT_B, ACCOUNT_C):
        repo.register(account_id)
    return repo


@pytest.fixture
def service(record_repo, account_repo):
    from puzzlebase.application.record_service import RecordService
    return RecordService(record_repo, account_repo)


@pytest.fixture
def sql_session_factory():
    """Managed session factory over an in-memory SQLite database."""
    from sqlalchemy import create_engine
    from sqlalchemy.orm import sessionmaker
    from sqlalchemy.pool import StaticPool
    from puzzlebase.infrastructure.database.connection import create_tables, managed_session_factory

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(engine)
    yield managed_session_factory(sessionmaker(bind=engine, expire_on_commit=False))
    engine.dispose()


# ---------------------------------------------------------------------------
# FastAPI TestClient with JSON-file stores
# ---------------------------------------------------------------------------

@pytest.fixture
def client(service):
    from fastapi import FastAPI
    from fastapi.testclient import TestClient
    from puzzlebase.api.routes.puzzle_routes import router, init_routes

    init_routes(service)
    app = FastAPI()
    app.include_router(router)
    return TestClient(app)
