"""
models.py
Membership domain: member variants, plan/charge constants, operation results.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, ClassVar

# Plan prices in rupees (metered-plan ladder)
PLAN_PRICES = {
    "basic": Decimal("6500"),
    "standard": Decimal("12500"),
    "deluxe": Decimal("18500"),
}
DEFAULT_PLAN = "basic"

ATTENDANCE_LIMIT = 30
PREMIUM_CHARGE = Decimal("50000")
DISCOUNT_RATE = Decimal("0.10")

REGULAR_POINTS_PER_VISIT = 5
PREMIUM_POINTS_PER_VISIT = 10


class MemberKind(str, enum.Enum):
    """Variant tag: 'regular' is the metered plan, 'premium' is prepaid."""

    REGULAR = "regular"
    PREMIUM = "premium"


class Outcome(str, enum.Enum):
    OK = "ok"
    DUPLICATE_IDENTITY = "duplicate_identity"
    NOT_FOUND = "not_found"
    NOT_ELIGIBLE = "not_eligible"
    INVALID_PLAN = "invalid_plan"
    ALREADY_ON_PLAN = "already_on_plan"
    PAYMENT_OVERFLOW = "payment_overflow"
    ALREADY_PAID_IN_FULL = "already_paid_in_full"
    DISCOUNT_NOT_ELIGIBLE = "discount_not_eligible"
    WRONG_VARIANT = "wrong_variant"
    INACTIVE = "inactive"
    ATTENDANCE_LIMIT_REACHED = "attendance_limit_reached"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class Result:
    outcome: Outcome
    message: str
    amount: Decimal | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


class GymError(Exception):
    """Base class for membership errors."""


class DuplicateIdentityError(GymError):
    """Raised when inserting a member whose id is already taken."""

    def __init__(self, member_id: int):
        super().__init__(f"Member ID {member_id} already exists")
        self.member_id = member_id


class MemberNotFoundError(GymError):
    """Raised when a member id does not exist."""

    def __init__(self, member_id: int):
        super().__init__(f"Member {member_id} not found")
        self.member_id = member_id


class InvalidAmountError(GymError, ValueError):
    """A payment amount that should never have passed input validation."""


def format_rs(amount) -> str:
    return f"Rs. {Decimal(amount):.2f}"


def to_money(value) -> Decimal:
    """
    Convert a payment value to Decimal without float noise.
    Floats go through str() so 0.1 stays 0.1.
    """
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            raise InvalidAmountError(f"Not a numeric amount: {value!r}") from None
    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite: {value!r}")
    if amount < 0:
        raise InvalidAmountError(f"Amount cannot be negative: {value!r}")
    return amount


@dataclass
class Member(ABC):
    """
    Shared member record. Profile strings are trusted as already validated.
    Activity counters only move through mark_attendance; `active` only through
    activate/deactivate or a revert.
    """

    id: int
    name: str
    location: str
    phone: str
    email: str
    gender: str
    dob: str
    membership_start_date: str
    attendance: int = field(default=0, init=False)
    loyalty_points: int = field(default=0, init=False)
    active: bool = field(default=False, init=False)

    kind: ClassVar[MemberKind]

    # the id is the directory key; charge and limit are per-class constants
    _READ_ONLY: ClassVar[tuple[str, ...]] = ("premium_charge", "attendance_limit")

    def __setattr__(self, name: str, value: Any) -> None:
        if name in self._READ_ONLY or (name == "id" and "id" in self.__dict__):
            raise AttributeError(f"{type(self).__name__}.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def status_label(self) -> str:
        return "Active" if self.active else "Inactive"

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False

    @abstractmethod
    def mark_attendance(self) -> None:
        """Record one visit. Callers check `active` (and any ceiling) first."""

    def _record_visit(self, points: int) -> None:
        self.attendance += 1
        self.loyalty_points += points

    def _reset_member(self) -> None:
        self.attendance = 0
        self.loyalty_points = 0
        self.active = False

    def to_record(self) -> dict[str, Any]:
        record = asdict(self)
        record["kind"] = self.kind.value
        return record


@dataclass
class MeteredPlanMember(Member):
    """Regular member on the basic/standard/deluxe ladder."""

    referral_source: str
    plan: str = field(default=DEFAULT_PLAN, init=False)
    price: Decimal = field(default=PLAN_PRICES[DEFAULT_PLAN], init=False)
    upgrade_eligible: bool = field(default=False, init=False)
    removal_reason: str = field(default="", init=False)

    kind: ClassVar[MemberKind] = MemberKind.REGULAR
    attendance_limit: ClassVar[int] = ATTENDANCE_LIMIT

    def mark_attendance(self) -> None:
        self._record_visit(REGULAR_POINTS_PER_VISIT)
        # one-way latch, only a revert clears it
        if self.attendance >= self.attendance_limit:
            self.upgrade_eligible = True

    @staticmethod
    def plan_price_of(plan: str) -> Decimal | None:
        return PLAN_PRICES.get(plan.strip().lower())

    def upgrade_plan(self, new_plan: str) -> Result:
        new_plan = new_plan.strip().lower()

        if new_plan == self.plan.lower():
            return Result(Outcome.ALREADY_ON_PLAN, f"You are already subscribed to {self.plan} plan")

        if not self.upgrade_eligible:
            return Result(
                Outcome.NOT_ELIGIBLE,
                f"Not eligible for upgrade. Required attendance: {self.attendance_limit}",
            )

        new_price = self.plan_price_of(new_plan)
        if new_price is None:
            return Result(
                Outcome.INVALID_PLAN,
                "Invalid plan. Available plans: " + ", ".join(PLAN_PRICES),
            )

        self.plan = new_plan
        self.price = new_price
        return Result(Outcome.OK, f"Plan upgraded to {new_plan} at price {format_rs(new_price)}", new_price)

    def revert(self, removal_reason: str) -> Result:
        self._reset_member()
        self.upgrade_eligible = False
        self.plan = DEFAULT_PLAN
        self.price = PLAN_PRICES[DEFAULT_PLAN]
        self.removal_reason = removal_reason
        return Result(Outcome.OK, f"Member reverted successfully. Reason: {removal_reason}")


@dataclass
class PrepaidMember(Member):
    """Premium member: one fixed charge, paid in instalments, 10% discount once settled."""

    personal_trainer: str
    paid_amount: Decimal = field(default=Decimal("0"), init=False)
    full_payment: bool = field(default=False, init=False)
    discount_amount: Decimal = field(default=Decimal("0"), init=False)

    kind: ClassVar[MemberKind] = MemberKind.PREMIUM
    premium_charge: ClassVar[Decimal] = PREMIUM_CHARGE

    @property
    def remaining_amount(self) -> Decimal:
        return self.premium_charge - self.paid_amount

    def mark_attendance(self) -> None:
        self._record_visit(PREMIUM_POINTS_PER_VISIT)

    def record_payment(self, amount) -> Result:
        """
        Apply a payment towards the premium charge.
        Overpayment is rejected as a whole; nothing is credited.
        Raises InvalidAmountError for negative or non-numeric amounts.
        """
        amount = to_money(amount)

        if self.full_payment:
            return Result(Outcome.ALREADY_PAID_IN_FULL, "Payment already completed. No due amount.")

        total = self.paid_amount + amount
        if total > self.premium_charge:
            return Result(
                Outcome.PAYMENT_OVERFLOW,
                f"Invalid payment amount. Exceeds premium charge of {format_rs(self.premium_charge)}",
            )

        self.paid_amount = total
        if self.paid_amount == self.premium_charge:
            self.full_payment = True
            return Result(Outcome.OK, "Payment successful. Payment completed in full!", Decimal("0"))

        remaining = self.remaining_amount
        return Result(
            Outcome.OK,
            f"Payment successful. Remaining amount to be paid: {format_rs(remaining)}",
            remaining,
        )

    pay_due_amount = record_payment

    def compute_discount(self) -> Result:
        if not self.full_payment:
            return Result(
                Outcome.DISCOUNT_NOT_ELIGIBLE,
                "No discount available. Complete the payment to avail 10% discount.",
            )
        self.discount_amount = self.premium_charge * DISCOUNT_RATE
        return Result(
            Outcome.OK,
            f"Discount calculated successfully. Discount amount: {format_rs(self.discount_amount)}",
            self.discount_amount,
        )

    def revert(self) -> Result:
        self._reset_member()
        self.personal_trainer = ""
        self.full_payment = False
        self.paid_amount = Decimal("0")
        self.discount_amount = Decimal("0")
        return Result(Outcome.OK, "Premium member reverted successfully.")


MEMBER_TYPES: dict[MemberKind, type[Member]] = {
    MemberKind.REGULAR: MeteredPlanMember,
    MemberKind.PREMIUM: PrepaidMember,
}

_PROFILE_FIELDS = ("id", "name", "location", "phone", "email", "gender", "dob", "membership_start_date")
_STATE_FIELDS = {
    MemberKind.REGULAR: ("plan", "price", "upgrade_eligible", "removal_reason"),
    MemberKind.PREMIUM: ("paid_amount", "full_payment", "discount_amount"),
}
_MONEY_FIELDS = {"price", "paid_amount", "discount_amount"}


def member_from_record(record: dict[str, Any]) -> Member:
    """Rebuild a member (profile plus activity/plan/payment state) from to_record() output."""
    kind = MemberKind(record["kind"])
    profile = {name: record[name] for name in _PROFILE_FIELDS}
    profile["id"] = int(profile["id"])

    if kind is MemberKind.REGULAR:
        member: Member = MeteredPlanMember(**profile, referral_source=record.get("referral_source") or "")
    else:
        member = PrepaidMember(**profile, personal_trainer=record.get("personal_trainer") or "")

    member.attendance = int(record.get("attendance") or 0)
    member.loyalty_points = int(record.get("loyalty_points") or 0)
    member.active = bool(record.get("active"))
    for name in _STATE_FIELDS[kind]:
        value = record.get(name)
        if value is None:
            continue
        if name in _MONEY_FIELDS:
            value = Decimal(str(value))
        elif name in ("upgrade_eligible", "full_payment"):
            value = bool(value)
        setattr(member, name, value)
    return member
