"""SQL-layer tests against a mocked psycopg2 connection."""

from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from pledgeflow.models import campaign, pledge


@pytest.fixture
def conn():
    return MagicMock(name="conn")


@pytest.fixture
def cur(conn):
    return conn.cursor.return_value.__enter__.return_value


def test_get_campaign_maps_row_and_coerces_amounts(conn, cur):
    expires = datetime(2026, 1, 1, tzinfo=timezone.utc)
    cur.fetchone.return_value = ("tr-1", "Drop test", Decimal("2500"), Decimal("10000"), "pending", expires)

    camp = campaign.get_campaign(conn, "tr-1")

    assert camp == {
        "id": "tr-1",
        "name": "Drop test",
        "current_funding": 2500,
        "test_cost": 10000,
        "status": "pending",
        "expiration_date": expires,
    }
    sql, params = cur.execute.call_args[0]
    assert "FROM test_requests" in sql
    assert params == ("tr-1",)


def test_get_campaign_missing_returns_none(conn, cur):
    cur.fetchone.return_value = None

    assert campaign.get_campaign(conn, "nope") is None


def test_list_expired_pending_filters_status_and_date(conn, cur):
    cur.fetchall.return_value = []

    assert campaign.list_expired_pending(conn) == []
    sql = cur.execute.call_args[0][0]
    assert "status = 'pending'" in sql
    assert "expiration_date < now()" in sql


def test_set_campaign_status_reports_rowcount(conn, cur):
    cur.rowcount = 1

    assert campaign.set_campaign_status(conn, "tr-1", "funded") is True
    assert cur.execute.call_args[0][1] == ("funded", "tr-1")


def test_expire_if_unfunded_guards_status_and_funding(conn, cur):
    cur.rowcount = 1

    assert campaign.expire_if_unfunded(conn, "tr-1") is True
    sql, params = cur.execute.call_args[0]
    assert "SET status = 'expired'" in sql
    assert "status = 'pending'" in sql
    assert "current_funding < test_cost" in sql
    assert params == ("tr-1",)


def test_expire_if_unfunded_reports_no_match(conn, cur):
    cur.rowcount = 0

    assert campaign.expire_if_unfunded(conn, "tr-1") is False


def test_list_for_campaign_filters_by_status(conn, cur):
    cur.fetchall.return_value = [
        ("p1", "tr-1", "u1", Decimal("5000"), "pm_1", None, "pending", None)
    ]

    rows = pledge.list_for_campaign(conn, "tr-1", ("pending", "failed"))

    assert rows[0]["amount"] == 5000
    assert rows[0]["payment_method_id"] == "pm_1"
    sql, params = cur.execute.call_args[0]
    assert "status = ANY(%s)" in sql
    assert params == ("tr-1", ["pending", "failed"])


def test_mark_charged_sets_status_timestamp_and_intent(conn, cur):
    pledge.mark_charged(conn, "p1", "pi_1")

    sql, params = cur.execute.call_args[0]
    assert "status = 'charged'" in sql
    assert "charged_at" in sql
    assert params == (None, "pi_1", "p1")


def test_mark_failed(conn, cur):
    pledge.mark_failed(conn, "p1")

    sql, params = cur.execute.call_args[0]
    assert "status = 'failed'" in sql
    assert params == ("p1",)


def test_cancel_pending_counts_returned_rows(conn, cur):
    cur.fetchall.return_value = [("p1",), ("p2",)]

    assert pledge.cancel_pending_for_campaign(conn, "tr-1") == 2
    sql = cur.execute.call_args[0][0]
    assert "status = 'cancelled'" in sql
    assert "status = 'pending'" in sql
