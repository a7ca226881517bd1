"""
directory.py
In-memory member directory: unique ids, lookup, insertion-ordered listing.
"""

from __future__ import annotations

from typing import Iterator

from models import DuplicateIdentityError, Member, MemberKind, MemberNotFoundError


class MemberDirectory:
    """
    Owns every member, keyed by id. Entries are never removed; a revert
    resets a member's state in place.
    Not thread-safe: one caller issues operations at a time.
    """

    def __init__(self, members=()):
        self._members: dict[int, Member] = {}
        for member in members:
            self.insert(member)

    def insert(self, member: Member) -> None:
        if member.id in self._members:
            raise DuplicateIdentityError(member.id)
        self._members[member.id] = member

    def lookup(self, member_id: int) -> Member:
        try:
            return self._members[member_id]
        except KeyError:
            raise MemberNotFoundError(member_id) from None

    def all(self) -> tuple[Member, ...]:
        # snapshot: later inserts do not show up in an already returned tuple
        return tuple(self._members.values())

    def of_kind(self, kind: MemberKind) -> tuple[Member, ...]:
        return tuple(m for m in self._members.values() if m.kind is kind)

    def __contains__(self, member_id: object) -> bool:
        return member_id in self._members

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[Member]:
        return iter(self.all())
