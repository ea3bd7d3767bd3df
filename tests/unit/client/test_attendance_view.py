from __future__ import annotations

from datetime import date

import pytest

from obravista.client.attendance_view import AttendanceView
from obravista.core.exceptions import ApiFailure, ValidationError
from obravista.schemas.attendance import AttendanceEntry

DAY = date(2024, 3, 4)


class FakeAttendanceGateway:
    def __init__(self):
        self.server = {
            1: AttendanceEntry(contractor_id=1, name="Joao Pedreiro"),
            2: AttendanceEntry(contractor_id=2, name="Bruno Servente", present=True, site_id=5),
        }
        self.calls = []
        self.fail = False

    def daily_sheet(self, day):
        return list(self.server.values())

    def upsert(self, day, contractor_id, present, site_id):
        self.calls.append((day, contractor_id, present, site_id))
        if self.fail:
            raise ApiFailure("timeout")
        self.server[contractor_id] = self.server[contractor_id].model_copy(
            update={"present": present, "site_id": site_id}
        )


@pytest.fixture
def gateway():
    return FakeAttendanceGateway()


def _view(gateway, notifier, confirmer):
    view = AttendanceView(gateway, confirmer, notifier)
    view.load(DAY)
    return view


def test_sheet_splits_pending_and_present(gateway, notifier, confirmer):
    view = _view(gateway, notifier, confirmer())
    assert [entry.name for entry in view.pending] == ["Joao Pedreiro"]
    assert [entry.name for entry in view.present] == ["Bruno Servente"]


def test_marking_present_needs_a_site(gateway, notifier, confirmer):
    view = _view(gateway, notifier, confirmer())
    with pytest.raises(ValidationError):
        view.set_presence(1, True)
    assert gateway.calls == []
    assert view.sheet.get(1).present is False

    assert view.set_presence(1, True, site_id=5) is True
    assert gateway.calls == [(DAY, 1, True, 5)]
    assert [entry.contractor_id for entry in view.present] == [2, 1]
    assert view.pending == []


def test_removing_presence_asks_first(gateway, notifier, confirmer):
    answers = confirmer(False, True)
    view = _view(gateway, notifier, answers)

    assert view.set_presence(2, False) is False
    assert gateway.calls == []
    assert view.sheet.get(2).present is True

    assert view.set_presence(2, False) is True
    assert len(answers.asked) == 2
    assert view.sheet.get(2).site_id is None


def test_untracked_contractor(gateway, notifier, confirmer):
    view = _view(gateway, notifier, confirmer())
    with pytest.raises(ValidationError):
        view.set_presence(99, False)


def test_api_failure_reloads_the_sheet(gateway, notifier, confirmer):
    view = _view(gateway, notifier, confirmer())
    gateway.fail = True

    assert view.set_presence(1, True, site_id=5) is False
    assert view.sheet.get(1).present is False
    assert notifier.errors == ["Could not save attendance: timeout"]
