from __future__ import annotations

import pytest
from loguru import logger


@pytest.fixture
def log_records():
    """Collect (level, message) tuples emitted through loguru."""
    records: list[tuple[str, str]] = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="TRACE",
    )
    yield records
    logger.remove(handler_id)
