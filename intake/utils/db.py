"""
PostgreSQL connection helper and typed store errors.

Connect failures surface as StoreUnavailable so callers can tell
"database down" apart from any other persistence failure.
"""

from __future__ import annotations
import os

import psycopg2
from dotenv import load_dotenv

load_dotenv()


class StoreError(Exception):
    """A create-record call failed."""


class StoreUnavailable(StoreError):
    """The store could not be reached."""


def classify_store_error(exc: BaseException) -> StoreError:
    if isinstance(exc, StoreError):
        return exc
    if isinstance(exc, (psycopg2.OperationalError, psycopg2.InterfaceError)):
        return StoreUnavailable(str(exc))
    if "connect" in str(exc).lower():
        return StoreUnavailable(str(exc))
    return StoreError(str(exc))


def get_db_connection():
    """
    Connect to PostgreSQL. Uses DATABASE_URL if set; otherwise falls back to
    DB_HOST, DB_NAME, DB_USER, DB_PASSWORD, DB_PORT.
    """
    timeout = int(os.getenv("DB_CONNECT_TIMEOUT", "5"))
    url = os.getenv("DATABASE_URL")
    try:
        if url:
            return psycopg2.connect(url, connect_timeout=timeout)
        return psycopg2.connect(
            host=os.getenv("DB_HOST", "127.0.0.1"),
            database=os.getenv("DB_NAME", "intake_dev"),
            user=os.getenv("DB_USER", "dev"),
            password=os.getenv("DB_PASSWORD", "dev"),
            port=os.getenv("DB_PORT", "65432"),
            connect_timeout=timeout,
        )
    except psycopg2.Error as e:
        raise StoreUnavailable(str(e)) from e
