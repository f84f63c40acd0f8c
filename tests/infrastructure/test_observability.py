"""JSONFormatter: base fields always present, unit extras only when set."""

import json
import logging

from unit_service.infrastructure.observability import (
    JSONFormatter, KeyValueFormatter, setup_logging,
)


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        "unit_service.services.unit_service", logging.INFO, __file__, 1,
        "Unit %s created", ("u1",), None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_base_fields():
    payload = json.loads(JSONFormatter().format(_record()))
    assert payload["level"] == "INFO"
    assert payload["logger"] == "unit_service.services.unit_service"
    assert payload["message"] == "Unit u1 created"
    assert "timestamp" in payload
    assert "unit_id" not in payload


def test_json_formatter_surfaces_unit_extras():
    payload = json.loads(JSONFormatter().format(
        _record(unit_id="u1", operation="create", user_id=None),
    ))
    assert payload["unit_id"] == "u1"
    assert payload["operation"] == "create"
    assert "user_id" not in payload


def test_key_value_formatter_appends_context():
    line = KeyValueFormatter().format(_record(unit_id="u1", operation="update"))
    assert line.endswith("[operation=update unit_id=u1]")
    assert "Unit u1 created" in line


def test_key_value_formatter_without_context():
    line = KeyValueFormatter().format(_record())
    assert not line.endswith("]")


def test_setup_logging_does_not_duplicate_handlers():
    root = logging.getLogger()
    original_level = root.level
    try:
        setup_logging("DEBUG", "text")
        handler = setup_logging("WARNING", "json")
        ours = [h for h in root.handlers if h.get_name() == handler.get_name()]
        assert ours == [handler]
        assert isinstance(handler.formatter, JSONFormatter)
        assert root.level == logging.WARNING
    finally:
        root.removeHandler(handler)
        root.setLevel(original_level)
