"""
utils.py
Validation, dates, money parsing, member report file, exports, sample data.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path

import pandas as pd

import services
from directory import MemberDirectory
from models import (
    InvalidAmountError,
    Member,
    MemberKind,
    MeteredPlanMember,
    PrepaidMember,
    format_rs,
    to_money,
)

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\d{10}$")
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
DATE_PLACEHOLDER = "YYYY/MM/DD"
MIN_YEAR = 1900
MAX_YEAR = 2025
MIN_AGE = 10
GENDERS = ("Male", "Female")


# ---------- Validation ----------

def validate_phone(phone: str) -> bool:
    return bool(PHONE_PATTERN.match(phone))


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def parse_member_date(text: str) -> date | None:
    """
    Parse YYYY/MM/DD within MIN_YEAR..MAX_YEAR.
    Returns None for anything malformed (wrong shape, Feb 30, 2023/02/29, ...).
    """
    text = text.strip()
    if not text or text == DATE_PLACEHOLDER:
        return None
    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        year, month, day = (int(p) for p in parts)
    except ValueError:
        return None
    if not MIN_YEAR <= year <= MAX_YEAR:
        return None
    try:
        return date(year, month, day)
    except ValueError:
        return None


def age_at(dob: date, on: date) -> int:
    age = on.year - dob.year
    if (on.month, on.day) < (dob.month, dob.day):
        age -= 1
    return age


def validate_member_id(member_id: str) -> list[str]:
    if not member_id.strip():
        return ["Please enter Member ID"]
    try:
        int(member_id)
    except ValueError:
        return ["Please enter a valid Member ID"]
    return []


def validate_amount(amount: str) -> list[str]:
    if not amount.strip():
        return ["Please enter paid amount"]
    try:
        to_money(amount)
    except InvalidAmountError:
        return ["Please enter a valid paid amount"]
    return []


def parse_amount(amount: str):
    return to_money(amount)


def validate_member_inputs(
    member_id: str,
    name: str,
    location: str,
    phone: str,
    email: str,
    gender: str,
    dob: str,
    start_date: str,
) -> list[str]:
    """Profile checks shared by both member types; empty list means valid."""
    required = (member_id, name, location, phone, email, gender, dob, start_date)
    if any(not str(v).strip() for v in required) or DATE_PLACEHOLDER in (dob, start_date):
        return ["Please fill all required fields"]

    errors: list[str] = []
    try:
        int(member_id)
    except ValueError:
        errors.append("Invalid ID format")
    if not validate_phone(phone.strip()):
        errors.append("Invalid phone number format")
    if not validate_email(email.strip()):
        errors.append("Invalid email format")
    if gender not in GENDERS:
        errors.append("Please select gender")

    dob_date = parse_member_date(dob)
    start = parse_member_date(start_date)
    if dob_date is None:
        errors.append(f"Invalid Date of Birth format ({DATE_PLACEHOLDER})")
    if start is None:
        errors.append(f"Invalid Membership Start Date format ({DATE_PLACEHOLDER})")
    if dob_date and start and age_at(dob_date, start) < MIN_AGE:
        errors.append(f"Member must be at least {MIN_AGE} years old to start membership")
    return errors


def validate_regular_inputs(*profile: str, referral_source: str) -> list[str]:
    errors = validate_member_inputs(*profile)
    if not referral_source.strip():
        errors.append("Please enter referral source")
    return errors


def validate_premium_inputs(*profile: str, personal_trainer: str) -> list[str]:
    errors = validate_member_inputs(*profile)
    if not personal_trainer.strip():
        errors.append("Please enter trainer name")
    return errors


def next_member_id(directory: MemberDirectory) -> int:
    return max((m.id for m in directory.all()), default=0) + 1


# ---------- Member report (fixed-width text) ----------

REPORT_LAYOUT = [
    ("ID", 6),
    ("Name", 20),
    ("Location", 20),
    ("Phone", 12),
    ("Email", 30),
    ("Gender", 8),
    ("DOB", 12),
    ("Start Date", 20),
    ("Type", 10),
    ("Plan/Trainer", 15),
    ("Price", 15),
    ("Status", 15),
    ("Full Pay", 12),
    ("Paid Amount", 15),
    ("Remaining", 15),
    ("Discount", 15),
]
REPORT_COLUMNS = [name for name, _ in REPORT_LAYOUT]
REPORT_GAP = 2
RULE = "-" * 250

REGULAR_VIEW = {
    "ID": "ID", "Name": "Name", "Location": "Location", "Phone": "Phone", "Email": "Email",
    "Gender": "Gender", "DOB": "DOB", "Start Date": "Start Date", "Plan/Trainer": "Plan",
    "Price": "Price", "Status": "Status",
}
PREMIUM_VIEW = {
    "ID": "ID", "Name": "Name", "Location": "Location", "Phone": "Phone", "Email": "Email",
    "Gender": "Gender", "DOB": "DOB", "Start Date": "Start Date", "Plan/Trainer": "Trainer",
    "Price": "Price", "Status": "Status", "Full Pay": "Full Pay", "Paid Amount": "Paid",
    "Remaining": "Remaining", "Discount": "Discount",
}


def _column_widths(rows: list[list[str]]) -> list[int]:
    # a column grows to its longest value; nothing is ever cut
    return [
        max([width, *(len(row[i]) for row in rows)])
        for i, (_, width) in enumerate(REPORT_LAYOUT)
    ]


def _report_line(values, widths: list[int]) -> str:
    cells = [str(v).ljust(width) for v, width in zip(values, widths)]
    return (" " * REPORT_GAP).join(cells) + "\n"


def _header_colspecs(header: str) -> list[tuple[int, int | None]]:
    """Column boundaries recovered from where each title sits in the header row."""
    starts = []
    pos = 0
    for name in REPORT_COLUMNS:
        pos = header.index(name, pos)
        starts.append(pos)
        pos += len(name)
    ends = [start - REPORT_GAP for start in starts[1:]] + [None]
    return list(zip(starts, ends))


def member_report_row(member: Member) -> list[str]:
    row = [
        member.id, member.name, member.location, member.phone, member.email,
        member.gender, member.dob, member.membership_start_date,
    ]
    if member.kind is MemberKind.REGULAR:
        row += ["Regular", member.plan, format_rs(member.price), member.status_label,
                "N/A", "N/A", "N/A", "N/A"]
    else:
        row += ["Premium", member.personal_trainer, format_rs(member.premium_charge), member.status_label,
                str(member.full_payment), format_rs(member.paid_amount),
                format_rs(member.remaining_amount), format_rs(member.discount_amount)]
    return [str(v) for v in row]


def write_member_report(members, path: Path, backup_path: Path | None = None) -> Path:
    """
    Write members as a fixed-width table. An existing report is moved to
    backup_path first (replacing any older backup).
    """
    path = Path(path)
    rows = [member_report_row(m) for m in members]
    widths = _column_widths(rows)

    if backup_path is not None and path.exists():
        path.replace(backup_path)

    with path.open("w", encoding="utf-8") as fh:
        fh.write(_report_line(REPORT_COLUMNS, widths))
        fh.write(RULE + "\n")
        for row in rows:
            fh.write(_report_line(row, widths))
        fh.write(RULE + "\n")

    logger.info("Wrote %d members to %s", len(rows), path)
    return path


def read_member_report(path: Path) -> dict[str, pd.DataFrame]:
    """Read a report written by write_member_report into Regular/Premium tables."""
    with Path(path).open(encoding="utf-8") as fh:
        header = fh.readline().rstrip("\n")

    df = pd.read_fwf(
        path,
        colspecs=_header_colspecs(header),
        names=REPORT_COLUMNS,
        header=None,
        skiprows=2,
        dtype=str,
        keep_default_na=False,
    )
    df = df[~df["ID"].str.startswith("-")]

    regular = df[df["Type"] == "Regular"]
    premium = df[df["Type"] == "Premium"]
    return {
        "Regular": regular[list(REGULAR_VIEW)].rename(columns=REGULAR_VIEW).reset_index(drop=True),
        "Premium": premium[list(PREMIUM_VIEW)].rename(columns=PREMIUM_VIEW).reset_index(drop=True),
    }


# ---------- Exports ----------

def members_frame(members) -> pd.DataFrame:
    return pd.DataFrame([m.to_record() for m in members])


def members_to_csv_bytes(members) -> bytes:
    return members_frame(members).to_csv(index=False).encode("utf-8")


# ---------- Sample data ----------

def sample_members(first_id: int) -> list[Member]:
    return [
        MeteredPlanMember(first_id, "Ahmed Hassan", "Kathmandu", "9800000001", "ahmed@example.com",
                          "Male", "1995/04/12", "2024/01/15", referral_source="Friend"),
        MeteredPlanMember(first_id + 1, "Mona Ali", "Lalitpur", "9800000002", "mona@example.com",
                          "Female", "2000/02/29", "2024/06/01", referral_source="Instagram"),
        PrepaidMember(first_id + 2, "Omar Samy", "Bhaktapur", "9800000003", "omar@example.com",
                      "Male", "1988/11/30", "2023/09/10", personal_trainer="Sita Rai"),
    ]


def insert_sample_data(directory: MemberDirectory, persist=None) -> list[Member]:
    """
    Add 3 sample members with fresh ids (safe to run multiple times: adds new members each time).
    Members whose id turns out to be taken are skipped.
    """
    added = []
    for member in sample_members(next_member_id(directory)):
        if services.enroll(directory, member, persist=persist).ok:
            added.append(member)
    return added
