"""
Pytest configuration and shared fixtures for transaction trace tests.
"""
import json
import pytest
from datetime import datetime, timedelta, timezone

from txn_trace.core.types import LogEntry, LogType


BASE_TIME = datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def base_time():
    """Timestamp every test trace starts at."""
    return BASE_TIME


@pytest.fixture
def make_entry():
    """Return a factory building entries at a millisecond offset from BASE_TIME."""
    def _make_entry(entry_id, offset_ms, log_type=LogType.API, duration_ms=10, **kwargs):
        kwargs.setdefault('thread_id', 't1')
        kwargs.setdefault('trace_id', 'trace-1')
        return LogEntry(
            entry_id=entry_id,
            timestamp=BASE_TIME + timedelta(milliseconds=offset_ms),
            log_type=log_type,
            duration_ms=duration_ms,
            **kwargs
        )

    return _make_entry


@pytest.fixture
def sample_entries(make_entry):
    """API call with a filter step that runs a SQL statement."""
    return [
        make_entry('api-1', 0, LogType.API, 100, api_code='GET_RECORD',
                   form='HPD:Help Desk', user='Demo', queue='Fast'),
        make_entry('filter-1', 5, LogType.FILTER, 20, filter_level=1,
                   filter_name='Check Status', user='Demo', queue='Fast'),
        make_entry('sql-1', 10, LogType.SQL, 5, sql_table='T123', user='Demo', queue='Fast'),
    ]


@pytest.fixture
def filter_chain_entries(make_entry):
    """API call with three nested filter levels."""
    return [
        make_entry('api-1', 0, LogType.API, 500),
        make_entry('filter-1', 10, LogType.FILTER, 200, filter_level=1),
        make_entry('filter-2', 20, LogType.FILTER, 100, filter_level=2),
        make_entry('filter-3', 30, LogType.FILTER, 50, filter_level=3),
    ]


@pytest.fixture
def sample_entry_records():
    """Entry records as they appear in a JSON export."""
    return [
        {
            "entry_id": "api-1",
            "timestamp": "2026-01-15T10:00:00.000Z",
            "log_type": "API",
            "duration_ms": 100,
            "thread_id": "t1",
            "trace_id": "trace-1",
            "api_code": "SE",
            "form": "HPD:Help Desk",
            "user": "Demo",
            "queue": "Fast",
            "success": True
        },
        {
            "entry_id": "sql-1",
            "timestamp": "2026-01-15T10:00:00.010Z",
            "log_type": "SQL",
            "duration_ms": 30,
            "thread_id": "t1",
            "trace_id": "trace-1",
            "sql_table": "T123",
            "user": "Demo",
            "queue": "Fast",
            "success": True
        },
        {
            "entry_id": "api-2",
            "timestamp": "2026-01-15T10:00:01.000Z",
            "log_type": "API",
            "duration_ms": 40,
            "thread_id": "t7",
            "trace_id": "trace-2",
            "user": "Allen",
            "queue": "List",
            "success": False,
            "error_message": "ARERR 302 Entry does not exist"
        }
    ]


@pytest.fixture
def sample_entry_file(tmp_path, sample_entry_records):
    """Create an export document with an "entries" array."""
    entry_file = tmp_path / "entries.json"
    with open(entry_file, "w") as f:
        json.dump({"trace_id": "", "entries": sample_entry_records}, f)

    return str(entry_file)


@pytest.fixture
def temp_json_file(tmp_path):
    """Create a temporary JSON file and return a helper function."""
    def _create_file(data):
        file_path = tmp_path / f"test_{id(data)}.json"
        with open(file_path, "w") as f:
            json.dump(data, f)
        return str(file_path)

    return _create_file
