"""Root conftest: test environment plus the production structlog pipeline, so caplog sees every event."""

from pathlib import Path

import pytest
import structlog
from dotenv import load_dotenv

from shared.logging import configure_structlog

load_dotenv(Path(__file__).resolve().parent.parent / ".env.tests")

configure_structlog(timestamps=False)


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Keep bound connection ids from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
