import psycopg2
import pytest

from intake.models import inquiry as inquiry_model
from intake.models import quotation as quotation_model
from intake.utils import db
from intake.utils.db import StoreError, StoreUnavailable, classify_store_error


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, sql, params):
        if self.conn.error is not None:
            raise self.conn.error
        self.conn.executed.append((sql, params))

    def fetchone(self):
        return self.conn.row


class FakeConnection:
    def __init__(self, row=None, error=None):
        self.row = row
        self.error = error
        self.executed = []
        self.committed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def cursor(self):
        return FakeCursor(self)

    def commit(self):
        self.committed = True


@pytest.mark.parametrize(
    "error, expected",
    [
        (psycopg2.OperationalError("timeout expired"), StoreUnavailable),
        (psycopg2.InterfaceError("connection already closed"), StoreUnavailable),
        (RuntimeError("could not connect to server"), StoreUnavailable),
        (psycopg2.IntegrityError("duplicate key"), StoreError),
        (ValueError("bad value"), StoreError),
    ],
)
def test_classify_store_error(error, expected):
    assert type(classify_store_error(error)) is expected


def test_classify_keeps_typed_errors():
    err = StoreUnavailable("down")
    assert classify_store_error(err) is err


def test_connect_failure_is_store_unavailable(monkeypatch):
    def refuse(*args, **kwargs):
        raise psycopg2.OperationalError("could not translate host name")

    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@nowhere/db")
    monkeypatch.setattr(db.psycopg2, "connect", refuse)

    with pytest.raises(StoreUnavailable):
        db.get_db_connection()


def test_create_inquiry_returns_record_with_string_id(monkeypatch):
    conn = FakeConnection(
        row=("6f1c", "Ada", "Analytical Cafe", "ada@example.com", "hi", "2026-10-19")
    )
    monkeypatch.setattr(inquiry_model, "get_db_connection", lambda: conn)

    record = inquiry_model.create_inquiry(
        name="Ada", company="Analytical Cafe", email="ada@example.com", message="hi"
    )

    assert record["id"] == "6f1c"
    assert record["created_at"] == "2026-10-19"
    assert conn.committed
    sql, params = conn.executed[0]
    assert "INSERT INTO inquiries" in sql
    assert params == ("Ada", "Analytical Cafe", "ada@example.com", "hi")


def test_create_quotation_wraps_constraint_errors(monkeypatch):
    conn = FakeConnection(error=psycopg2.IntegrityError("violates check constraint"))
    monkeypatch.setattr(quotation_model, "get_db_connection", lambda: conn)

    with pytest.raises(StoreError) as excinfo:
        quotation_model.create_quotation(
            first_name="Grace",
            last_name="Hopper",
            email="grace@navy.example.org",
            country="Thailand",
            company_name="Compiler Hotel",
            company_address="1 Sukhumvit Rd",
            preferred_solution="beat-breeze",
            number_of_zones=2,
        )
    assert not isinstance(excinfo.value, StoreUnavailable)
