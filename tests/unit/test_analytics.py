"""Tests for funnel analytics."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from intake.schemas.analytics import TimePeriod
from intake.services.analytics_service import (
    AnalyticsService,
    build_drop_off,
    completion_rate,
    drop_off_rate,
    resolve_since,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)


class TestResolveSince:
    """Tests for analytics windows."""

    def test_seven_days(self) -> None:
        assert resolve_since(TimePeriod.SEVEN_DAYS, NOW) == NOW - timedelta(days=7)

    def test_thirty_days(self) -> None:
        assert resolve_since(TimePeriod.THIRTY_DAYS, NOW) == NOW - timedelta(days=30)

    def test_all_time(self) -> None:
        assert resolve_since(TimePeriod.ALL, NOW) is None


class TestRates:
    """Tests for rate arithmetic."""

    def test_completion_rate(self) -> None:
        assert completion_rate(10, 3) == pytest.approx(30.0)

    def test_completion_rate_without_sessions(self) -> None:
        assert completion_rate(0, 0) == 0.0

    def test_drop_off_rate(self) -> None:
        assert drop_off_rate(10, 5) == pytest.approx(50.0)

    def test_drop_off_rate_without_views(self) -> None:
        assert drop_off_rate(0, 0) == 0.0

    def test_drop_off_rate_never_negative(self) -> None:
        assert drop_off_rate(5, 8) == 0.0

    def test_drop_off_rate_full(self) -> None:
        assert drop_off_rate(5, 0) == 100.0


class TestBuildDropOff:
    """Tests for the per-step funnel rows."""

    def test_continued_is_next_step_views(self) -> None:
        rows = build_drop_off({0: 10, 1: 8, 2: 6, 3: 5}, total_submissions=4)

        assert [(r.step, r.viewed, r.continued) for r in rows] == [
            (0, 10, 8),
            (1, 8, 6),
            (2, 6, 5),
            (3, 5, 4),
        ]
        assert rows[0].drop_off_rate == pytest.approx(20.0)
        assert rows[3].drop_off_rate == pytest.approx(20.0)

    def test_always_one_row_per_step(self) -> None:
        rows = build_drop_off({}, total_submissions=0)

        assert len(rows) == 4
        assert all(r.viewed == 0 and r.drop_off_rate == 0.0 for r in rows)

    def test_skipped_step_means_full_drop_off(self) -> None:
        rows = build_drop_off({0: 3, 2: 3}, total_submissions=0)

        assert rows[0].drop_off_rate == 100.0
        assert rows[1].drop_off_rate == 0.0

    def test_abandoned_after_first_step(self) -> None:
        rows = build_drop_off({0: 1}, total_submissions=0)

        assert rows[0].drop_off_rate == 100.0
        assert rows[1].viewed == 0


def _result(one: object = None, rows: list[tuple[int, int]] | None = None) -> MagicMock:
    result = MagicMock()
    result.one.return_value = one
    result.all.return_value = rows or []
    return result


class TestGetSummary:
    """Tests for AnalyticsService.get_summary with a mocked session."""

    async def test_summary_from_queries(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(
            side_effect=[
                _result(one=(4, 2, 95.5)),
                _result(rows=[(0, 4), (1, 3), (2, 3), (3, 2)]),
            ]
        )

        summary = await AnalyticsService().get_summary(db, TimePeriod.SEVEN_DAYS, now=NOW)

        assert summary.total_sessions == 4
        assert summary.total_submissions == 2
        assert summary.completion_rate == pytest.approx(50.0)
        assert summary.average_time_to_complete == pytest.approx(95.5)
        assert [r.viewed for r in summary.drop_off_by_step] == [4, 3, 3, 2]
        assert summary.drop_off_by_step[3].continued == 2

    async def test_empty_window(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[_result(one=(0, 0, None)), _result(rows=[])])

        summary = await AnalyticsService().get_summary(db, TimePeriod.ALL)

        assert summary.total_sessions == 0
        assert summary.completion_rate == 0.0
        assert summary.average_time_to_complete is None
        assert len(summary.drop_off_by_step) == 4

    async def test_window_filters_queries(self) -> None:
        db = MagicMock()
        db.execute = AsyncMock(side_effect=[_result(one=(0, 0, None)), _result(rows=[])])

        await AnalyticsService().get_summary(db, TimePeriod.THIRTY_DAYS, now=NOW)

        session_sql = str(db.execute.await_args_list[0].args[0])
        events_sql = str(db.execute.await_args_list[1].args[0])
        assert "form_sessions.started_at >=" in session_sql
        assert "form_analytics_events.timestamp >=" in events_sql

    def test_summary_serializes_camel_case(self) -> None:
        rows = build_drop_off({0: 1}, total_submissions=1)
        data = rows[0].model_dump(by_alias=True)

        assert set(data) == {"step", "viewed", "continued", "dropOffRate"}
