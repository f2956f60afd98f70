"""Tests for the reminder cadence table and status projection."""

from datetime import date

import pytest

from engine.errors import UnknownCadence
from engine.reminders import (
    BUILTIN_CADENCES,
    build_cadence_table,
    compute_reminder_status,
    reminder_schedule,
    resolve_cadence,
)
from models.payment import ReminderCadence, ReminderState

READY = ReminderState.READY_TO_SEND
SENT = ReminderState.SENT
UPCOMING = ReminderState.UPCOMING
DISABLED = ReminderState.DISABLED

WEEK = ReminderCadence("one_week_before", "1 Week Before + Due Day", 7)


class TestCadenceTable:
    def test_builtin_options(self):
        expected = {
            "off": None,
            "due_only": 0,
            "one_day_before": 1,
            "three_days_before": 3,
            "one_week_before": 7,
        }
        assert {name: c.lead_days for name, c in BUILTIN_CADENCES.items()} == expected

    def test_extension_adds_entries(self):
        table = build_cadence_table("two_weeks_before:14, four_days_before:4,quiet:off")
        assert table["two_weeks_before"].lead_days == 14
        assert table["four_days_before"].lead_days == 4
        assert table["quiet"].is_off
        assert table["one_week_before"].lead_days == 7

    def test_empty_extension_is_builtins(self):
        assert build_cadence_table("") == BUILTIN_CADENCES
        assert build_cadence_table(None) == BUILTIN_CADENCES

    @pytest.mark.parametrize("extra", ["broken", "name:", ":3", "x:-1", "x:soon"])
    def test_malformed_extension_rejected(self, extra):
        with pytest.raises(ValueError):
            build_cadence_table(extra)

    def test_resolve_unknown(self):
        with pytest.raises(UnknownCadence):
            resolve_cadence("every_hour")

    def test_resolve_known(self):
        assert resolve_cadence("due_only").lead_days == 0


class TestComputeReminderStatus:
    def test_week_cadence_ready_on_lead_day(self):
        status = compute_reminder_status(7, WEEK)
        assert status.lead == READY
        assert status.due == UPCOMING

    def test_week_cadence_sent_after_lead_day(self):
        assert compute_reminder_status(3, WEEK).lead == SENT

    def test_week_cadence_upcoming_before_lead_day(self):
        assert compute_reminder_status(10, WEEK).lead == UPCOMING

    def test_due_day(self):
        status = compute_reminder_status(0, WEEK)
        assert status.lead == SENT
        assert status.due == READY

    @pytest.mark.parametrize("name", ["due_only", "one_day_before", "three_days_before", "one_week_before"])
    @pytest.mark.parametrize("days", [-1, -15])
    def test_overdue_collapses_to_sent(self, name, days):
        status = compute_reminder_status(days, BUILTIN_CADENCES[name])
        assert (status.lead, status.due) == (SENT, SENT)

    @pytest.mark.parametrize("days", [-5, 0, 1, 30])
    def test_off_disables_both(self, days):
        status = compute_reminder_status(days, BUILTIN_CADENCES["off"])
        assert (status.lead, status.due) == (DISABLED, DISABLED)

    def test_due_only_on_due_day(self):
        status = compute_reminder_status(0, BUILTIN_CADENCES["due_only"])
        assert (status.lead, status.due) == (READY, READY)

    def test_default_cadence_day_before(self):
        status = compute_reminder_status(1, BUILTIN_CADENCES["one_day_before"])
        assert (status.lead, status.due) == (READY, UPCOMING)


class TestReminderSchedule:
    def test_lead_and_due_dates(self):
        schedule = reminder_schedule(date(2025, 3, 3), BUILTIN_CADENCES["one_week_before"])
        assert [(r.kind, r.date) for r in schedule] == [
            ("advance", date(2025, 2, 24)),
            ("due", date(2025, 3, 3)),
        ]
        assert schedule[0].label == "Reminder 1 (7 days before)"

    def test_single_day_label(self):
        schedule = reminder_schedule(date(2025, 3, 1), BUILTIN_CADENCES["one_day_before"])
        assert schedule[0].label == "Reminder 1 (1 day before)"
        assert schedule[0].date == date(2025, 2, 28)

    def test_due_only(self):
        schedule = reminder_schedule(date(2025, 3, 1), BUILTIN_CADENCES["due_only"])
        assert [(r.kind, r.date) for r in schedule] == [("due", date(2025, 3, 1))]

    def test_off(self):
        assert reminder_schedule(date(2025, 3, 1), BUILTIN_CADENCES["off"]) == []
