"""Tests for the JSONL event logger."""

from pathlib import Path

from tokenfactory.config import load_config, set_config_value
from tokenfactory.core.errors import UnauthorizedError
from tokenfactory.core.logger import EventLogger
from tokenfactory.core.messages import Response, TransferInstruction


class TestEventLogger:
    """Tests for EventLogger."""

    def test_creates_parent_dirs_and_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "events.jsonl"
        EventLogger(path)
        assert path.exists()
        assert path.read_text() == ""

    def test_events_are_sequenced(self, tmp_path: Path) -> None:
        logger = EventLogger(tmp_path / "events.jsonl")
        logger.log("first", {"x": 1})
        logger.log("second", {"x": 2})

        events = logger.read_recent(10)
        assert [e["event_type"] for e in events] == ["first", "second"]
        assert [e["sequence"] for e in events] == [1, 2]
        assert all("timestamp" in e for e in events)

    def test_success_and_failure(self, tmp_path: Path) -> None:
        logger = EventLogger(tmp_path / "events.jsonl")
        response = (
            Response()
            .add_attribute("method", "execute_burn")
            .add_message(TransferInstruction("juno1s"))
        )
        logger.log_success("execute", "juno1s", response)
        logger.log_failure("execute", "juno1x", UnauthorizedError("juno1x", "Caller is not the manager"))

        ok, failed = logger.read_recent(2)
        assert ok["success"] is True
        assert ok["attributes"] == {"method": "execute_burn"}
        assert ok["message_count"] == 1
        assert failed["success"] is False
        assert failed["error_code"] == "unauthorized"
        assert failed["sender"] == "juno1x"

    def test_read_recent_limits(self, tmp_path: Path) -> None:
        logger = EventLogger(tmp_path / "events.jsonl")
        for i in range(5):
            logger.log("tick", {"i": i})
        assert [e["i"] for e in logger.read_recent(2)] == [3, 4]

    def test_read_recent_default_from_config(self, tmp_path: Path) -> None:
        load_config(None)
        set_config_value("logging.default_recent", 3)
        logger = EventLogger(tmp_path / "events.jsonl")
        for i in range(5):
            logger.log("tick", {"i": i})
        assert len(logger.read_recent()) == 3

    def test_appends_unless_truncated(self, tmp_path: Path) -> None:
        path = tmp_path / "events.jsonl"
        EventLogger(path).log("old", {})
        assert len(EventLogger(path).read_recent(10)) == 1
        assert EventLogger(path, truncate=True).read_recent(10) == []
