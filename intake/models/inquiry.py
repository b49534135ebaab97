from typing import Any, Dict

import psycopg2

from intake.utils.db import get_db_connection, classify_store_error

COLS = ["id", "name", "company", "email", "message", "created_at"]


def create_inquiry(*, name: str, company: str, email: str, message: str) -> Dict[str, Any]:
    sql = """
    INSERT INTO inquiries (name, company, email, message)
    VALUES (%s, %s, %s, %s)
    RETURNING id, name, company, email, message, created_at
    """
    try:
        with get_db_connection() as conn, conn.cursor() as cur:
            cur.execute(sql, (name, company, email, message))
            row = cur.fetchone()
            conn.commit()
    except psycopg2.Error as e:
        raise classify_store_error(e) from e
    record = dict(zip(COLS, row))
    record["id"] = str(record["id"])
    return record
