"""
Record loader service - reads session insight records from disk.

Framework-agnostic service used by the CLI and MCP server. Accepts either a
JSON array of records or JSONL (one record per line).
"""

from __future__ import annotations

import json
from pathlib import Path

import pydantic

from session_insights.exceptions import RecordLoadError
from session_insights.protocols import LoggerProtocol, NullLogger
from session_insights.schemas.records import SessionInsightRecord, parse_day


class RecordLoaderService:
    """
    Service for loading session insight records.

    Categorical values outside their domain are coerced by the record model, so
    validation only fails on structurally broken input (missing session_id,
    non-numeric token counts, invalid JSON).
    """

    def __init__(self, logger: LoggerProtocol | None = None) -> None:
        self.logger = logger or NullLogger()

    async def load_records(self, path: Path) -> list[SessionInsightRecord]:
        """
        Load and validate all records from a file.

        Args:
            path: JSON array file or JSONL file

        Returns:
            Records in file order

        Raises:
            RecordLoadError: If the file is missing or any record is invalid
        """
        if not path.is_file():
            raise RecordLoadError(path, 'file not found')

        await self.logger.info(f'Loading records from {path}')

        text = path.read_text(encoding='utf-8')
        if text.lstrip().startswith('['):
            records = self._parse_array(path, text)
        else:
            records = self._parse_jsonl(path, text)

        undated = sum(1 for record in records if record.day is None)
        if undated:
            await self.logger.warning(f'{undated} record(s) have an unparseable date and are excluded from trends')

        await self.logger.info(f'Loaded {len(records)} records from {path.name}')
        return records

    async def load_digest_dates(self, path: Path) -> set[str]:
        """
        Load the set of dates that have a daily digest (one ISO date per line).

        Raises:
            RecordLoadError: If the file is missing
        """
        if not path.is_file():
            raise RecordLoadError(path, 'file not found')

        dates = set()
        for line_num, line in enumerate(path.read_text(encoding='utf-8').splitlines(), 1):
            line = line.strip()
            if not line:
                continue
            day = parse_day(line)
            if day is None:
                await self.logger.warning(f'{path.name}:{line_num}: ignoring invalid date {line!r}')
                continue
            dates.add(day.isoformat())

        await self.logger.debug(f'Loaded {len(dates)} digest dates from {path.name}')
        return dates

    def _parse_array(self, path: Path, text: str) -> list[SessionInsightRecord]:
        try:
            raw = json.loads(text)
        except json.JSONDecodeError as e:
            raise RecordLoadError(path, f'invalid JSON: {e.msg}', e.lineno) from e

        return [self._validate(path, item, record_index=index) for index, item in enumerate(raw, 1)]

    def _parse_jsonl(self, path: Path, text: str) -> list[SessionInsightRecord]:
        records = []
        for line_num, line in enumerate(text.splitlines(), 1):
            line = line.strip()
            if not line:
                continue

            try:
                raw = json.loads(line)
            except json.JSONDecodeError as e:
                raise RecordLoadError(path, f'invalid JSON: {e.msg}', line_num) from e

            records.append(self._validate(path, raw, line_number=line_num))
        return records

    def _validate(
        self,
        path: Path,
        raw: object,
        line_number: int | None = None,
        record_index: int | None = None,
    ) -> SessionInsightRecord:
        try:
            return SessionInsightRecord.model_validate(raw)
        except pydantic.ValidationError as e:
            first = e.errors()[0]
            field = '.'.join(str(part) for part in first['loc']) or 'record'
            prefix = f'record {record_index}: ' if record_index is not None else ''
            raise RecordLoadError(path, f"{prefix}{field}: {first['msg']}", line_number) from e
