"""
db.py
SQLite helpers + member snapshot persistence (one row per member, both variants).
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from decimal import Decimal

from directory import MemberDirectory
from models import DuplicateIdentityError, Member, member_from_record
from settings import settings

logger = logging.getLogger(__name__)

DB_FILE = settings.db_file

MEMBER_COLUMNS = (
    "id", "kind", "name", "location", "phone", "email", "gender", "dob", "membership_start_date",
    "attendance", "loyalty_points", "active",
    "referral_source", "plan", "price", "upgrade_eligible", "removal_reason",
    "personal_trainer", "paid_amount", "full_payment", "discount_amount",
)


@contextmanager
def get_conn():
    conn = sqlite3.connect(DB_FILE, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()


def execute(sql: str, params: tuple = ()) -> int:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.lastrowid


def fetch_all(sql: str, params: tuple = ()) -> list[sqlite3.Row]:
    with get_conn() as conn:
        cur = conn.execute(sql, params)
        return cur.fetchall()


def _create_tables() -> None:
    # Money is stored as TEXT so Decimal values come back exactly
    execute(
        """
        CREATE TABLE IF NOT EXISTS members (
            id INTEGER PRIMARY KEY,
            kind TEXT NOT NULL CHECK(kind IN ('regular','premium')),
            name TEXT NOT NULL,
            location TEXT NOT NULL,
            phone TEXT NOT NULL,
            email TEXT NOT NULL,
            gender TEXT NOT NULL,
            dob TEXT NOT NULL,
            membership_start_date TEXT NOT NULL,
            attendance INTEGER NOT NULL DEFAULT 0,
            loyalty_points INTEGER NOT NULL DEFAULT 0,
            active INTEGER NOT NULL DEFAULT 0,
            referral_source TEXT,
            plan TEXT,
            price TEXT,
            upgrade_eligible INTEGER,
            removal_reason TEXT,
            personal_trainer TEXT,
            paid_amount TEXT,
            full_payment INTEGER,
            discount_amount TEXT
        )
        """
    )


def init_db() -> None:
    """
    Initialize the database.
    - Create tables
    """
    _create_tables()


def _member_params(member: Member) -> tuple:
    record = member.to_record()
    values = []
    for column in MEMBER_COLUMNS:
        value = record.get(column)
        if isinstance(value, Decimal):
            value = str(value)
        elif isinstance(value, bool):
            value = int(value)
        values.append(value)
    return tuple(values)


_INSERT_SQL = "INSERT INTO members({cols}) VALUES({marks})".format(
    cols=", ".join(MEMBER_COLUMNS),
    marks=",".join("?" for _ in MEMBER_COLUMNS),
)

# Updates only; new members go through insert_member so an id is never overwritten
_UPSERT_SQL = _INSERT_SQL + " ON CONFLICT(id) DO UPDATE SET {updates}".format(
    updates=", ".join(f"{c}=excluded.{c}" for c in MEMBER_COLUMNS if c != "id"),
)


def insert_member(member: Member) -> None:
    """Store a new member; raises DuplicateIdentityError if the id is already saved."""
    try:
        execute(_INSERT_SQL, _member_params(member))
    except sqlite3.IntegrityError as e:
        if "UNIQUE" not in str(e):
            raise
        raise DuplicateIdentityError(member.id) from None
    logger.info("Inserted member %s into %s", member.id, DB_FILE)


def save_member(member: Member) -> None:
    execute(_UPSERT_SQL, _member_params(member))


def load_directory() -> MemberDirectory:
    rows = fetch_all("SELECT * FROM members ORDER BY id ASC")
    directory = MemberDirectory(member_from_record(dict(r)) for r in rows)
    logger.info("Loaded %d members from %s", len(directory), DB_FILE)
    return directory
