# [TESTER] v1

from __future__ import annotations

from typing import Iterator

import pytest
import structlog
from structlog.testing import capture_logs

from pairswap import EngineConfig, Exchange
from pairswap.log_config import configure_logging


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    yield
    structlog.reset_defaults()


def test_operations_emit_events() -> None:
    ex = Exchange(EngineConfig(owner="deployer"))
    with capture_logs() as logs:
        ex.create_pair("A", "B")
        ex.add_liquidity("A", "B", 1000, 1000, 0, "lp")
        ex.swap_a_for_b("A", "B", 100, 0, "t")
        ex.remove_liquidity("A", "B", 10, 0, 0, "lp")
        ex.set_protocol_fee_percent(10, "deployer")

    events = [entry["event"] for entry in logs]
    assert events == [
        "pair_created",
        "liquidity_added",
        "swap_executed",
        "liquidity_removed",
        "protocol_fee_updated",
    ]
    assert logs[2]["pair"] == "A/B"
    assert logs[2]["direction"] == "a-to-b"


def test_rejections_are_logged_with_code() -> None:
    ex = Exchange(EngineConfig(owner="deployer"))
    ex.create_pair("A", "B")
    with capture_logs() as logs:
        ex.swap_a_for_b("A", "B", 100, 0, "t")

    assert len(logs) == 1
    assert logs[0]["event"] == "operation_rejected"
    assert logs[0]["code"] == 102
    assert logs[0]["reason"] == "zero_liquidity"
    assert logs[0]["log_level"] == "info"


def test_configure_logging_json(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("info", json=True)
    structlog.get_logger().info("hello", answer=42)
    out = capsys.readouterr().out
    assert '"event": "hello"' in out
    assert '"answer": 42' in out


def test_configure_logging_filters_level(capsys: pytest.CaptureFixture[str]) -> None:
    configure_logging("WARNING", json=True)
    structlog.get_logger().info("quiet")
    assert capsys.readouterr().out == ""


def test_configure_logging_unknown_level() -> None:
    with pytest.raises(ValueError, match="unknown log level"):
        configure_logging("LOUD")
