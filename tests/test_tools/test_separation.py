"""
Tests for Inter-Slot Separation
"""

from datetime import date, datetime, time, timedelta
from unittest.mock import patch

import pytest

from config import SchedulerConfig
from tools import separation
from tools.scheduler import Slot


def at(day: date, hh: int, mm: int = 0) -> datetime:
    return datetime.combine(day, time(hh, mm))


class TestRequiredGap:
    """Gap selection"""

    def test_default_gap_when_no_conflict(self):
        assert separation.required_gap_seconds(False, 0.0, SchedulerConfig()) == 900

    def test_separate_hours_win_when_larger(self):
        assert separation.required_gap_seconds(False, 2.0, SchedulerConfig()) == 7200

    def test_avoid_stays_at_default_gap(self):
        assert separation.required_gap_seconds(True, 0.0, SchedulerConfig()) == 900


class TestCrossSlotConstraint:
    """Strongest constraint across two slots"""

    def test_max_over_all_pairs(self, checker, make_med, day):
        a = Slot(at(day, 8), [make_med("doxy", name="Doxycycline"), make_med("levo", name="Synthroid")])
        b = Slot(at(day, 9), [make_med("calc", name="Calcium", ingredients=["calcium carbonate"])])

        # doxycycline/antacid 2h, levothyroxine/calcium 4h
        assert separation.cross_slot_constraint(a, b, checker) == (False, 4.0)

    def test_avoid_flag(self, checker, make_med, day):
        a = Slot(at(day, 8), [make_med("w", name="Warfarin")])
        b = Slot(at(day, 9), [make_med("n", name="Naproxen")])
        assert separation.cross_slot_constraint(a, b, checker) == (True, 0.0)


class TestEnforce:
    """Forward separation sweep"""

    @pytest.mark.unit
    def test_input_slots_not_mutated(self, checker, make_med, day):
        slots = [
            Slot(at(day, 8), [make_med("a")]),
            Slot(at(day, 8, 5), [make_med("b")]),
        ]

        out = separation.enforce(slots, checker)

        assert slots[1].time == at(day, 8, 5)
        assert out[1].time == at(day, 8, 15)

    @pytest.mark.unit
    def test_satisfied_gaps_unchanged(self, checker, make_med, day):
        slots = [Slot(at(day, 8), [make_med("a")]), Slot(at(day, 12), [make_med("b")])]
        assert [s.time for s in separation.enforce(slots, checker)] == [at(day, 8), at(day, 12)]

    @pytest.mark.unit
    def test_push_moves_the_later_slot(self, checker, make_med, day):
        slots = [
            Slot(at(day, 8), [make_med("doxy", name="Doxycycline")]),
            Slot(at(day, 8, 30), [make_med("iron", name="Iron")]),
            Slot(at(day, 9, 50), [make_med("c", name="Vitamin C")]),
        ]

        out = separation.enforce(slots, checker)

        # iron moves to 10:00, then sits 10 min after vitamin C and moves again
        assert [s.time for s in out] == [at(day, 8), at(day, 9, 50), at(day, 10, 5)]
        assert [s.medication_names for s in out] == [["Doxycycline"], ["Vitamin C"], ["Iron"]]

    @pytest.mark.unit
    def test_single_pass_does_not_revisit(self, make_med, day):
        """A later push may re-violate an earlier pair; one sweep leaves it"""
        slots = [
            Slot(at(day, 8), [make_med("a")]),
            Slot(at(day, 8, 5), [make_med("b")]),
            Slot(at(day, 8, 10), [make_med("c")]),
            Slot(at(day, 8, 20), [make_med("d")]),
        ]
        hours = {frozenset({"a", "b"}): 1.0, frozenset({"b", "d"}): 35 / 60}

        def fake_constraint(x, y, _checker):
            key = frozenset({x.medications[0].id, y.medications[0].id})
            return False, hours.get(key, 0.0)

        with patch.object(separation, "cross_slot_constraint", side_effect=fake_constraint):
            out = separation.enforce(slots, checker=object())

        times = {s.medications[0].id: s.time for s in out}
        assert times == {
            "a": at(day, 8),
            "b": at(day, 9),
            "c": at(day, 8, 15),
            "d": at(day, 8, 30),
        }
        # b/d now sit 30 min apart against a 35 min requirement
        assert times["b"] - times["d"] < timedelta(minutes=35)

    @pytest.mark.unit
    def test_empty_and_single(self, checker, make_med, day):
        assert separation.enforce([], checker) == []
        single = [Slot(at(day, 8), [make_med("a")])]
        assert separation.enforce(single, checker) == single

    @pytest.mark.unit
    def test_push_may_pass_midnight(self, checker, make_med, day):
        slots = [
            Slot(at(day, 22, 55), [make_med("doxy", name="Doxycycline")]),
            Slot(at(day, 22, 55), [make_med("iron", name="Iron")]),
        ]
        out = separation.enforce(slots, checker)
        assert out[1].time == at(day, 22, 55) + timedelta(hours=2)
