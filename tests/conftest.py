"""
Shared fixtures for the membership tests.
"""

import pytest

from directory import MemberDirectory
from models import MeteredPlanMember, PrepaidMember


@pytest.fixture
def regular_member():
    return MeteredPlanMember(
        1, "Ram Thapa", "Pokhara", "9812345678", "ram@example.com",
        "Male", "1990/05/20", "2024/01/10", referral_source="Friend",
    )


@pytest.fixture
def premium_member():
    return PrepaidMember(
        2, "Gita Sharma", "Kathmandu", "9801234567", "gita@example.com",
        "Female", "1992/08/14", "2024/02/01", personal_trainer="Hari KC",
    )


@pytest.fixture
def directory(regular_member, premium_member):
    return MemberDirectory([regular_member, premium_member])


def attend(member, times):
    for _ in range(times):
        member.mark_attendance()
