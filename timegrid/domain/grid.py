"""Domain entities for the utilization grid."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Union

MILLIS_PER_HOUR = 60 * 60 * 1000


@dataclass(slots=True)
class Timing:
    """Time booked for one subject on one day, with a secondary breakdown.

    Durations are kept in the provider's integer units so sums are exact in
    any order; ``hours`` and ``references`` are derived on read.
    """

    units: int = 0
    reference_units: dict[str, int] = field(default_factory=dict)
    bookings: int = 0
    units_per_hour: int = MILLIS_PER_HOUR

    @property
    def hours(self) -> float:
        return self.units / self.units_per_hour

    @property
    def references(self) -> dict[str, float]:
        return {reference: units / self.units_per_hour for reference, units in self.reference_units.items()}

    def add(self, reference: str, units: int, bookings: int = 1) -> None:
        self.units += units
        self.reference_units[reference] = self.reference_units.get(reference, 0) + units
        self.bookings += bookings

    def absorb(self, other: "Timing") -> None:
        if other.units_per_hour != self.units_per_hour:
            raise ValueError("cannot combine timings with different duration units")
        self.units += other.units
        self.bookings += other.bookings
        for reference, units in other.reference_units.items():
            self.reference_units[reference] = self.reference_units.get(reference, 0) + units

    def copy(self) -> "Timing":
        return Timing(
            units=self.units,
            reference_units=dict(self.reference_units),
            bookings=self.bookings,
            units_per_hour=self.units_per_hour,
        )


@dataclass(slots=True)
class ListSubject:
    target_type: ClassVar[str] = "list"

    id: str
    name: str
    space: str
    entries: dict[str, Timing] = field(default_factory=dict)


@dataclass(slots=True)
class UserSubject:
    target_type: ClassVar[str] = "user"

    id: str
    name: str
    entries: dict[str, Timing] = field(default_factory=dict)


@dataclass(slots=True)
class TagSubject:
    """Tags are identified by their name."""

    target_type: ClassVar[str] = "tag"

    id: str
    name: str
    entries: dict[str, Timing] = field(default_factory=dict)


Subject = Union[ListSubject, UserSubject, TagSubject]


@dataclass(slots=True)
class DimensionTables:
    lists: dict[str, ListSubject] = field(default_factory=dict)
    users: dict[str, UserSubject] = field(default_factory=dict)
    tags: dict[str, TagSubject] = field(default_factory=dict)

    def sorted_lists(self) -> list[ListSubject]:
        return sorted(self.lists.values(), key=lambda item: (item.name.lower(), item.id))

    def sorted_users(self) -> list[UserSubject]:
        return sorted(self.users.values(), key=lambda item: (item.name.lower(), item.id))

    def sorted_tags(self) -> list[TagSubject]:
        return sorted(self.tags.values(), key=lambda item: item.name.lower())

    def subjects(self) -> list[Subject]:
        return [*self.lists.values(), *self.users.values(), *self.tags.values()]

    def find(self, target_type: str, target_id: str) -> Subject | None:
        table = {"list": self.lists, "user": self.users, "tag": self.tags}.get(target_type)
        if table is None:
            return None
        return table.get(target_id)
