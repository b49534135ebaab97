from typing import Any, Dict

import psycopg2

from intake.utils.db import get_db_connection, classify_store_error

COLS = [
    "id",
    "first_name",
    "last_name",
    "email",
    "country",
    "company_name",
    "company_address",
    "preferred_solution",
    "number_of_zones",
    "created_at",
]


def create_quotation(
    *,
    first_name: str,
    last_name: str,
    email: str,
    country: str,
    company_name: str,
    company_address: str,
    preferred_solution: str,
    number_of_zones: int,
) -> Dict[str, Any]:
    sql = """
    INSERT INTO quotations (
      first_name, last_name, email, country, company_name,
      company_address, preferred_solution, number_of_zones
    )
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
    RETURNING id, first_name, last_name, email, country, company_name,
              company_address, preferred_solution, number_of_zones, created_at
    """
    params = (
        first_name,
        last_name,
        email,
        country,
        company_name,
        company_address,
        preferred_solution,
        number_of_zones,
    )
    try:
        with get_db_connection() as conn, conn.cursor() as cur:
            cur.execute(sql, params)
            row = cur.fetchone()
            conn.commit()
    except psycopg2.Error as e:
        raise classify_store_error(e) from e
    record = dict(zip(COLS, row))
    record["id"] = str(record["id"])
    return record
