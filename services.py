"""
services.py
Operator desk: id-based member operations with the caller-side guards
(member exists, right variant, active, attendance ceiling) applied before
the entity is touched. Every function returns a Result; nothing here raises
for a business condition.
"""

from __future__ import annotations

import logging

from directory import MemberDirectory
from models import (
    DuplicateIdentityError,
    Member,
    MemberKind,
    MemberNotFoundError,
    Outcome,
    Result,
)

logger = logging.getLogger(__name__)

NOT_FOUND = Result(Outcome.NOT_FOUND, "Member not found")


def _log(action: str, member_id: int, result: Result) -> Result:
    level = logging.INFO if result.ok else logging.WARNING
    logger.log(level, "%s member=%s outcome=%s", action, member_id, result.outcome.value)
    return result


def _resolve(directory: MemberDirectory, member_id: int) -> Member | None:
    try:
        return directory.lookup(member_id)
    except MemberNotFoundError:
        return None


def enroll(directory: MemberDirectory, member: Member, persist=None) -> Result:
    """
    Add a member to the directory. When `persist` is given it stores the new
    member first and raises DuplicateIdentityError if the id is already taken
    there; the directory is only updated once that succeeds.
    """
    duplicate = Result(Outcome.DUPLICATE_IDENTITY, "Member ID already exists!")
    if member.id in directory:
        return _log("enroll", member.id, duplicate)
    try:
        if persist is not None:
            persist(member)
        directory.insert(member)
    except DuplicateIdentityError:
        return _log("enroll", member.id, duplicate)

    label = "Regular" if member.kind is MemberKind.REGULAR else "Premium"
    return _log("enroll", member.id, Result(Outcome.OK, f"{label} member added successfully"))


def activate(directory: MemberDirectory, member_id: int) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("activate", member_id, NOT_FOUND)
    member.activate()
    return _log("activate", member_id, Result(Outcome.OK, "Membership activated successfully"))


def deactivate(directory: MemberDirectory, member_id: int) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("deactivate", member_id, NOT_FOUND)
    member.deactivate()
    return _log("deactivate", member_id, Result(Outcome.OK, "Membership deactivated successfully"))


def mark_attendance(directory: MemberDirectory, member_id: int) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("attendance", member_id, NOT_FOUND)
    if not member.active:
        return _log("attendance", member_id, Result(Outcome.INACTIVE, "Member is not active"))
    if member.kind is MemberKind.REGULAR and member.attendance >= member.attendance_limit:
        return _log(
            "attendance",
            member_id,
            Result(
                Outcome.ATTENDANCE_LIMIT_REACHED,
                f"Attendance limit of {member.attendance_limit} visits reached",
            ),
        )

    member.mark_attendance()
    return _log("attendance", member_id, Result(Outcome.OK, "Attendance marked successfully"))


def upgrade_plan(directory: MemberDirectory, member_id: int, new_plan: str) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("upgrade", member_id, NOT_FOUND)
    if member.kind is not MemberKind.REGULAR:
        return _log("upgrade", member_id, Result(Outcome.WRONG_VARIANT, "Only regular members can upgrade plans"))
    if not member.active:
        return _log("upgrade", member_id, Result(Outcome.INACTIVE, "Member must be active to upgrade plan"))
    return _log("upgrade", member_id, member.upgrade_plan(new_plan))


def pay_due_amount(directory: MemberDirectory, member_id: int, amount) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("payment", member_id, NOT_FOUND)
    if member.kind is not MemberKind.PREMIUM:
        return _log("payment", member_id, Result(Outcome.WRONG_VARIANT, "Only premium members can pay due amounts"))
    return _log("payment", member_id, member.record_payment(amount))


def calculate_discount(directory: MemberDirectory, member_id: int) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("discount", member_id, NOT_FOUND)
    if member.kind is not MemberKind.PREMIUM:
        return _log(
            "discount", member_id, Result(Outcome.WRONG_VARIANT, "Regular members are not eligible for discounts")
        )
    return _log("discount", member_id, member.compute_discount())


def revert_regular_member(directory: MemberDirectory, member_id: int, removal_reason: str) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("revert", member_id, NOT_FOUND)
    if member.kind is not MemberKind.REGULAR:
        return _log("revert", member_id, Result(Outcome.WRONG_VARIANT, "This member is not a Regular Member"))
    if not removal_reason.strip():
        return _log("revert", member_id, Result(Outcome.INVALID_INPUT, "Please enter removal reason"))
    return _log("revert", member_id, member.revert(removal_reason.strip()))


def revert_premium_member(directory: MemberDirectory, member_id: int) -> Result:
    member = _resolve(directory, member_id)
    if member is None:
        return _log("revert", member_id, NOT_FOUND)
    if member.kind is not MemberKind.PREMIUM:
        return _log("revert", member_id, Result(Outcome.WRONG_VARIANT, "This member is not a Premium Member"))
    return _log("revert", member_id, member.revert())
