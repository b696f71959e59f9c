"""Shared fixtures for session-insights tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from session_insights.schemas.records import SessionInsightRecord

# Path to fixtures directory (relative to this file)
FIXTURES_DIR = Path(__file__).parent / 'fixtures'
RECORDS_FIXTURE = FIXTURES_DIR / 'records.jsonl'

# Dates used by the records fixture
D1 = '2026-01-20'
D2 = '2026-01-21'

type RecordFactory = Callable[..., SessionInsightRecord]


@pytest.fixture
def make_record() -> RecordFactory:
    """Factory building records with sensible defaults; keyword overrides win."""
    counter = 0

    def _make(**overrides: Any) -> SessionInsightRecord:
        nonlocal counter
        counter += 1
        data: dict[str, Any] = {
            'session_id': f'session-{counter}',
            'session_name': f'session {counter}',
            'date': D1,
        }
        data.update(overrides)
        return SessionInsightRecord.model_validate(data)

    return _make


@pytest.fixture
def scenario_records(make_record: RecordFactory) -> list[SessionInsightRecord]:
    """Two days: D1 has one friction session and one clean one, D2 has two failures."""
    return [
        make_record(
            session_id='d1-friction',
            date=D1,
            friction_types=['timeout'],
            outcome='achieved',
            satisfaction='satisfied',
        ),
        make_record(session_id='d1-clean', date=D1, outcome='achieved', satisfaction='happy'),
        make_record(session_id='d2-first', date=D2, outcome='not_achieved', satisfaction='frustrated'),
        make_record(session_id='d2-second', date=D2, outcome='not_achieved', satisfaction='frustrated'),
    ]
