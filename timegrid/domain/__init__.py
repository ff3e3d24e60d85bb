"""Domain layer definitions."""

from .grid import MILLIS_PER_HOUR, DimensionTables, ListSubject, Subject, TagSubject, Timing, UserSubject

__all__ = [
    "MILLIS_PER_HOUR",
    "DimensionTables",
    "ListSubject",
    "Subject",
    "TagSubject",
    "Timing",
    "UserSubject",
]
