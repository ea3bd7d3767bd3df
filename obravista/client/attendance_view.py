"""Daily attendance sheet store."""

from __future__ import annotations

from datetime import date

from obravista.client.interaction import Confirmer, Notifier
from obravista.client.resources import AttendanceGateway
from obravista.core.exceptions import ApiFailure
from obravista.domain.attendance import DailySheet, assert_presence
from obravista.schemas.attendance import AttendanceEntry


class AttendanceView:
    def __init__(self, gateway: AttendanceGateway, confirmer: Confirmer, notifier: Notifier) -> None:
        self.gateway = gateway
        self.confirmer = confirmer
        self.notifier = notifier
        self.day: date | None = None
        self.sheet = DailySheet()

    def load(self, day: date) -> DailySheet:
        self.day = day
        try:
            self.sheet = DailySheet.from_entries(self.gateway.daily_sheet(day))
        except ApiFailure as exc:
            self.notifier.error(f"Could not load attendance: {exc}")
        return self.sheet

    @property
    def pending(self) -> list[AttendanceEntry]:
        return self.sheet.pending

    @property
    def present(self) -> list[AttendanceEntry]:
        return self.sheet.present

    def set_presence(self, contractor_id: int, present: bool, site_id: int | None = None) -> bool:
        """Record presence for the loaded day; returns False when cancelled or rejected by the API.

        A present mark without a site raises ``ValidationError`` before any
        call and leaves the sheet untouched.
        """
        presence = assert_presence(present, site_id)
        current = self.sheet.presence(contractor_id)
        if current.present and not presence.present:
            if not self.confirmer.confirm("Remove this contractor's presence for the day?"):
                return False

        try:
            self.gateway.upsert(self.day, contractor_id, presence.present, presence.site_id)
        except ApiFailure as exc:
            self.notifier.error(f"Could not save attendance: {exc}")
            self.load(self.day)
            return False
        self.sheet.apply(contractor_id, presence)
        return True
