"""
Test Configuration

Environment setup MUST happen before any application import: Settings and
the loguru sinks read these variables at import time.

Architecture:
- Unit tests (test/service/check_in/unit/): AsyncMock doubles and the in-memory store
- API tests (test/service/check_in/api/): FastAPI TestClient with container overrides
- Integration tests (test/service/check_in/integration/): asyncpg repos against a
  PostgreSQL test database migrated with alembic; skipped when no server is reachable
"""

import os
from pathlib import Path


def _early_setup_test_environment() -> None:
    """Set test environment variables before any module imports."""
    test_log_dir = Path(__file__).parent / 'test_log'
    test_log_dir.mkdir(exist_ok=True)
    os.environ['TEST_LOG_DIR'] = str(test_log_dir)

    # Integration tests migrate and truncate this database, never the dev one
    os.environ['POSTGRES_DB'] = 'check_in_test_db'

    # No PostgreSQL in unit/API tests
    os.environ['CHECK_IN_REPO_BACKEND'] = 'memory'
    os.environ['DISPLAY_TIMEZONE'] = 'UTC'
    os.environ['QR_SIGNATURE_REQUIRED'] = 'true'
    os.environ.setdefault('QR_SECRET_KEY', 'test_qr_secret')
    os.environ.setdefault('SECRET_KEY', 'test_secret_key')


# Call immediately to set env vars before any imports
_early_setup_test_environment()
