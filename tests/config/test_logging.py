"""Tests for configure_logging and the records an evaluation emits."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from datetime import UTC, datetime

import pytest
import structlog

from datexpr.config.logging import LOGGER_NAME, configure_logging
from datexpr.expressions import evaluate


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Put the root and datexpr loggers back the way they were."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    package_level = logging.getLogger(LOGGER_NAME).level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger(LOGGER_NAME).setLevel(package_level)


def _json_records(capfd: pytest.CaptureFixture[str]) -> list[dict[str, object]]:
    return [json.loads(line) for line in capfd.readouterr().err.splitlines() if line.strip()]


class TestLevels:
    @pytest.mark.parametrize(
        ("verbose", "expected"), [(True, logging.DEBUG), (False, logging.WARNING)]
    )
    def test_package_level(self, verbose: bool, expected: int) -> None:
        configure_logging(verbose=verbose)
        assert logging.getLogger(LOGGER_NAME).level == expected
        assert logging.getLogger().level == logging.WARNING

    def test_single_handler_after_reconfigure(self) -> None:
        configure_logging(verbose=True)
        configure_logging(log_json=True)
        assert len(logging.getLogger().handlers) == 1

    def test_other_libraries_stay_quiet(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("dateutil").debug("parser noise")
        assert capfd.readouterr().err == ""


class TestJsonRecords:
    def test_structlog_event(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        structlog.get_logger("datexpr.test").warning("zone fallback", zone="Mars/Base")
        [record] = _json_records(capfd)
        assert record["event"] == "zone fallback"
        assert record["zone"] == "Mars/Base"
        assert record["level"] == "warning"
        assert record["logger"] == "datexpr.test"
        assert str(record["timestamp"]).endswith("Z")

    def test_non_json_values_use_str(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        moment = datetime(2021, 2, 12, 15, 34, 15, tzinfo=UTC)
        structlog.get_logger("datexpr.test").warning("parsed", at=moment)
        [record] = _json_records(capfd)
        assert record["at"] == str(moment)

    def test_unsupported_local_zone_warns(
        self, capfd: pytest.CaptureFixture[str], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        from datexpr.calendar.zones import local_zone
        from datexpr.config.settings import reset_settings

        monkeypatch.setenv("DATEXPR_LOCAL_ZONE", "Mars/Base")
        reset_settings()
        configure_logging(log_json=True)
        local_zone()
        [record] = _json_records(capfd)
        assert record["level"] == "warning"
        assert record["logger"] == "datexpr.calendar.zones"
        assert "Mars/Base" in str(record["event"])


class TestEvaluationRecords:
    def test_records_carry_expression_name(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        evaluate(["$dateIsValid"], "2021-02-12")
        records = _json_records(capfd)
        assert records
        assert {record["level"] for record in records} == {"debug"}
        assert all(str(record["logger"]).startswith("datexpr.") for record in records)
        assert {record["expression"] for record in records} == {"$dateIsValid"}

    def test_nested_expression_rebinds_name(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        evaluate(["$dateGt", ["$dateMoveBackward", {"days": 1}]], "2021-02-12T12:00:00Z")
        names = [record["expression"] for record in _json_records(capfd)]
        assert names[0] == "$dateMoveBackward"
        assert names[-1] == "$dateGt"

    def test_context_is_cleared_afterwards(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        evaluate(["$dateIsValid"], "2021-02-12")
        capfd.readouterr()
        logging.getLogger("datexpr.test").warning("after")
        [record] = _json_records(capfd)
        assert "expression" not in record

    def test_quiet_without_verbose(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(log_json=True)
        evaluate(["$dateIsValid"], "2021-02-12")
        assert capfd.readouterr().err == ""
