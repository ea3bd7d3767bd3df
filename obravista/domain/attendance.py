"""Daily attendance sheet reconciliation."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from obravista.core.exceptions import ValidationError
from obravista.schemas.attendance import AttendanceEntry


@dataclass(frozen=True)
class Presence:
    present: bool = False
    site_id: int | None = None


def assert_presence(present: bool, site_id: int | None) -> Presence:
    if present and site_id is None:
        raise ValidationError("Select a site before marking the contractor present.")
    return Presence(present=present, site_id=site_id)


@dataclass
class DailySheet:
    """One date's attendance: a single per-contractor mapping with derived views."""

    entries: dict[int, AttendanceEntry] = field(default_factory=dict)

    @classmethod
    def from_entries(cls, entries: Iterable[AttendanceEntry]) -> "DailySheet":
        return cls(entries={entry.contractor_id: entry for entry in entries})

    def get(self, contractor_id: int) -> AttendanceEntry:
        try:
            return self.entries[contractor_id]
        except KeyError as exc:
            raise ValidationError(f"Contractor {contractor_id} is not tracked on this sheet.") from exc

    def presence(self, contractor_id: int) -> Presence:
        entry = self.get(contractor_id)
        return Presence(present=entry.present, site_id=entry.site_id)

    def apply(self, contractor_id: int, presence: Presence) -> AttendanceEntry:
        entry = self.get(contractor_id)
        updated = entry.model_copy(update={"present": presence.present, "site_id": presence.site_id})
        self.entries[contractor_id] = updated
        return updated

    @property
    def pending(self) -> list[AttendanceEntry]:
        return sorted((e for e in self.entries.values() if not e.present), key=lambda e: e.name.lower())

    @property
    def present(self) -> list[AttendanceEntry]:
        return sorted((e for e in self.entries.values() if e.present), key=lambda e: e.name.lower())

