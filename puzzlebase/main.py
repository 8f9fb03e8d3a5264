"""Entry point. Wires record stores into the service and routes.

Persistence strategy:
  - If DATABASE_URL is set  -> PostgreSQL via SQLAlchemy.
  - Otherwise               -> JSON file fallback (development only).
"""
import logging
import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(BASE_DIR)
load_dotenv(os.path.join(PROJECT_DIR, ".env"))

from fastapi import FastAPI

from puzzlebase.api.routes.puzzle_routes import router as puzzle_router, init_routes
from puzzlebase.application.ranking import PERSONAL_RANKING_SCAN_LIMIT
from puzzlebase.application.record_service import RecordService

DATABASE_URL = os.environ.get("DATABASE_URL", "")
DATA_DIR = os.environ.get("PUZZLEBASE_DATA_DIR", os.path.join(PROJECT_DIR, "data"))
RANKING_SCAN_LIMIT = int(os.environ.get("RANKING_SCAN_LIMIT", PERSONAL_RANKING_SCAN_LIMIT))

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Puzzlebase",
    description="Puzzle completion records, statistics and rankings.",
    version="1.0.0",
)

# ---------------------------------------------------------------------------
# Persistence wiring
# ---------------------------------------------------------------------------

if DATABASE_URL:
    from puzzlebase.infrastructure.database.connection import (
        init_engine, create_tables, managed_session_factory,
    )
    from puzzlebase.infrastructure.repositories.pg_record_repository import (
        PgAccountRepository, PgRecordRepository,
    )

    init_engine()
    try:
        create_tables()
    except Exception as _db_exc:
        logging.getLogger("puzzlebase.startup").error(
            "Could not verify tables: %s: %s", type(_db_exc).__name__, _db_exc
        )
    _sf = managed_session_factory()

    record_repo = PgRecordRepository(_sf)
    account_repo = PgAccountRepository(_sf)
    _persistence = "postgresql"
else:
    from puzzlebase.infrastructure.repositories.record_repository import JsonRecordRepository
    from puzzlebase.infrastructure.repositories.account_repository import JsonAccountRepository

    record_repo = JsonRecordRepository(data_path=os.path.join(DATA_DIR, "records.json"))
    account_repo = JsonAccountRepository(data_path=os.path.join(DATA_DIR, "accounts.json"))
    _persistence = "json"

print(f"[PUZZLEBASE] Persistence: {_persistence}")

record_service = RecordService(record_repo, account_repo, scan_limit=RANKING_SCAN_LIMIT)
init_routes(record_service)
app.include_router(puzzle_router)


@app.get("/health")
def health():
    result = {
        "status": "online",
        "system": "Puzzlebase v1.0.0",
        "persistence": _persistence,
    }
    if DATABASE_URL:
        from puzzlebase.infrastructure.database.connection import check_health
        result["database"] = "connected" if check_health() else "disconnected"
    return result


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "puzzlebase.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_excludes=["*.json", "__pycache__/*", "data/*"],
    )
