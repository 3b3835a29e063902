from __future__ import annotations

from datetime import datetime, timedelta, timezone

from uptime_checker.schemas import ProbeResult
from uptime_checker.services.aggregator import average_response_time_ms, round_half_up, uptime_percent

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


def _result(status: str, *, ago: timedelta = timedelta(minutes=5), ms: int = 100) -> ProbeResult:
    ts = (NOW - ago).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return ProbeResult(
        url="https://example.com",
        name="example",
        status=status,
        response_time_ms=ms,
        status_code=200 if status == "up" else 0,
        error=None if status == "up" else "boom",
        timestamp=ts,
    )


def test_uptime_of_empty_history_is_zero() -> None:
    assert uptime_percent([], NOW.timestamp()) == 0


def test_uptime_rounds_two_of_three() -> None:
    h = [_result("up"), _result("down"), _result("up")]
    assert uptime_percent(h, NOW.timestamp()) == 67


def test_uptime_ignores_results_outside_window() -> None:
    h = [
        _result("up", ago=timedelta(hours=1)),
        _result("down", ago=timedelta(hours=25)),
        _result("down", ago=timedelta(days=3)),
    ]
    assert uptime_percent(h, NOW.timestamp()) == 100


def test_uptime_is_zero_when_nothing_in_window() -> None:
    h = [_result("up", ago=timedelta(hours=30))]
    assert uptime_percent(h, NOW.timestamp()) == 0


def test_uptime_skips_unparseable_timestamps() -> None:
    bad = _result("down").model_copy(update={"timestamp": "yesterday"})
    assert uptime_percent([_result("up"), bad], NOW.timestamp()) == 100


def test_average_response_time_ignores_zero() -> None:
    h = [_result("up", ms=100), _result("down", ms=0), _result("up", ms=300)]
    assert average_response_time_ms(h) == 200


def test_average_response_time_empty_is_zero() -> None:
    assert average_response_time_ms([]) == 0
    assert average_response_time_ms([_result("down", ms=0)]) == 0


def test_average_response_time_rounds_half_up() -> None:
    h = [_result("up", ms=1), _result("up", ms=2)]
    assert average_response_time_ms(h) == 2
    assert round_half_up(66.5) == 67
