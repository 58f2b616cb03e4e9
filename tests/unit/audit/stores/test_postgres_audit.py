"""Tests for PostgresAuditLogStore SQL building and row mapping."""

from datetime import UTC, datetime
from uuid import uuid4

import pytest

from medcenter.audit.models import AuditLogFilter
from medcenter.audit.stores.postgres import PostgresAuditLogStore
from medcenter.db.errors import StorageError

from builders import make_conn, make_event, make_pool


class TestBuildWhere:
    """Tests for the WHERE clause builder."""

    def test_no_filters(self) -> None:
        assert PostgresAuditLogStore._build_where(AuditLogFilter()) == ("", [])

    def test_all_filters_are_parametrized(self) -> None:
        actor = uuid4()
        start = datetime(2025, 1, 1, tzinfo=UTC)
        end = datetime(2025, 2, 1, tzinfo=UTC)

        where, params = PostgresAuditLogStore._build_where(
            AuditLogFilter(start_date=start, end_date=end, actor_id=actor, action_name="X")
        )

        assert where == (
            " WHERE occurred_at >= $1 AND occurred_at <= $2"
            " AND actor_id = $3 AND action_name = $4"
        )
        assert params == [start, end, actor, "X"]


class TestRowMapping:
    """Tests for row conversion."""

    def test_round_trip_through_row(self) -> None:
        event = make_event(actor_id=uuid4(), payload='{"a":1}')
        row = dict(
            zip(
                ["id", "action_name", "description", "actor_id", "payload", "occurred_at"],
                PostgresAuditLogStore._to_row(event),
                strict=True,
            )
        )
        assert PostgresAuditLogStore._from_row(row) == event


class TestQueries:
    """Tests for statements issued against the connection."""

    async def test_append_many_uses_one_executemany(self) -> None:
        conn = make_conn()
        store = PostgresAuditLogStore(make_pool(conn))

        await store.append_many([make_event(), make_event()])

        conn.executemany.assert_awaited_once()
        sql, rows = conn.executemany.await_args.args
        assert "ON CONFLICT (id) DO NOTHING" in sql
        assert len(rows) == 2

    async def test_append_many_empty_is_noop(self) -> None:
        conn = make_conn()
        await PostgresAuditLogStore(make_pool(conn)).append_many([])
        conn.executemany.assert_not_awaited()

    async def test_query_pages_with_limit_and_offset(self) -> None:
        conn = make_conn()
        conn.fetchval.return_value = 25
        store = PostgresAuditLogStore(make_pool(conn))

        page = await store.query(AuditLogFilter(action_name="X"), page_number=3, page_size=10)

        sql, *params = conn.fetch.await_args.args
        assert "ORDER BY occurred_at DESC" in sql
        assert "LIMIT $2 OFFSET $3" in sql
        assert params == ["X", 10, 20]
        assert page.total_count == 25

    async def test_storage_errors_propagate(self) -> None:
        conn = make_conn()
        conn.executemany.side_effect = StorageError("down")
        store = PostgresAuditLogStore(make_pool(conn))

        with pytest.raises(StorageError):
            await store.append(make_event())
