import json

import pytest

from sprint_app.core.error_log import FileErrorLog, SlotErrorLog, open_error_log
from sprint_app.core.models import ErrorRecord


def test_slot_is_initialized_to_empty_array():
    storage = {}
    SlotErrorLog(storage)
    assert storage == {"errors": "[]"}


def test_existing_slot_is_kept():
    storage = {"errors": json.dumps([{"error": "earlier"}])}
    log = SlotErrorLog(storage)
    assert log.read() == [ErrorRecord("earlier")]


def test_record_appends_serialized_records():
    storage = {}
    log = SlotErrorLog(storage, slot="close_errors")
    log.record(ErrorRecord("first", 12))
    log.record(ErrorRecord("second"))
    assert json.loads(storage["close_errors"]) == [
        {"error": "first", "workItemId": 12},
        {"error": "second"},
    ]
    assert len(log) == 2


def test_clear_empties_the_slot():
    log = SlotErrorLog({})
    log.record(ErrorRecord("boom", 1))
    log.clear()
    assert log.read() == []


def test_corrupt_slot_raises():
    log = SlotErrorLog({"errors": json.dumps({"error": "not a list"})})
    with pytest.raises(ValueError):
        log.read()


def test_file_log_round_trip(tmp_path):
    path = tmp_path / "logs" / "errors.json"
    log = FileErrorLog(path)
    assert log.read() == []
    log.record(ErrorRecord("boom", 7))
    assert json.loads(path.read_text()) == [{"error": "boom", "workItemId": 7}]
    assert FileErrorLog(path).read() == [ErrorRecord("boom", 7)]
    log.clear()
    assert len(log) == 0


def test_open_error_log_prefers_file_when_path_given(tmp_path):
    log = open_error_log({}, tmp_path / "errors.json")
    assert isinstance(log, FileErrorLog)
    assert log.path == tmp_path / "errors.json"


@pytest.mark.parametrize("path", [None, ""])
def test_open_error_log_falls_back_to_session_slot(path):
    storage = {}
    log = open_error_log(storage, path)
    assert isinstance(log, SlotErrorLog)
    assert storage == {"errors": "[]"}
