import itertools
from unittest.mock import Mock

import pytest
from pytest import MonkeyPatch

from sysfs_backlight import config
from sysfs_backlight.exceptions import InvalidInputError, WriteError
from sysfs_backlight.linux import Light
from sysfs_backlight.sweep import SweepPlan, plan_sweep, run_sweep

from .helpers import FakeSysfs


class TestSweepPlan:
    def test_example(self):
        assert list(SweepPlan(0, 10, 4, 0).values()) == [3, 5, 8, 10]

    def test_downwards(self):
        assert list(SweepPlan(10, 0, 4, 0).values()) == [7, 5, 2, 0]

    def test_no_op(self):
        plan = SweepPlan(42, 42, 20, 0.025)
        assert list(plan.values()) == []
        assert len(plan) == 0

    def test_fewer_units_than_steps(self):
        assert list(SweepPlan(5, 8, 20, 0).values()) == [6, 7, 8]
        assert list(SweepPlan(8, 5, 20, 0).values()) == [7, 6, 5]

    def test_single_step(self):
        assert list(SweepPlan(0, 19200, 1, 0).values()) == [19200]

    def test_step_count_respected(self):
        assert len(SweepPlan(0, 19200, 20, 0)) == 20

    @pytest.mark.parametrize('start,end', [
        (a, b) for a, b in itertools.product((0, 1, 7, 50, 128, 254, 255), repeat=2) if a != b
    ])
    @pytest.mark.parametrize('steps', (1, 3, 20, 64))
    def test_monotonic_and_exact_end(self, start, end, steps):
        values = list(SweepPlan(start, end, steps, 0).values())
        assert values[-1] == end
        sequence = [start] + values
        pairs = list(zip(sequence, sequence[1:]))
        if end > start:
            assert all(a < b for a, b in pairs)
        else:
            assert all(a > b for a, b in pairs)
        assert all(0 <= v <= 255 for v in values)
        assert len(values) <= steps


class TestPlanSweep:
    def test_uses_config_defaults(self, monkeypatch: MonkeyPatch):
        monkeypatch.setattr(config, 'SWEEP_STEPS', 7)
        monkeypatch.setattr(config, 'SWEEP_DELAY', 0.5)
        assert plan_sweep(0, 100) == SweepPlan(0, 100, 7, 0.5)

    def test_explicit_values(self):
        assert plan_sweep(100, 0, 100, steps=3, delay=0) == SweepPlan(100, 0, 3, 0)

    @pytest.mark.parametrize('kwargs', [
        {'start': -1, 'end': 10},
        {'start': 0, 'end': -10},
        {'start': 0, 'end': 101, 'max_raw': 100},
        {'start': 101, 'end': 0, 'max_raw': 100},
        {'start': 0, 'end': 10, 'steps': 0},
        {'start': 0, 'end': 10, 'delay': -0.1},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(InvalidInputError):
            plan_sweep(**kwargs)


class TestRunSweep:
    def test_writes_every_value(self, light: Light, sysfs: FakeSysfs, mocker):
        spy = mocker.spy(light, 'set')
        sleep = Mock()
        plan = SweepPlan(50, 100, 5, 0.02)
        assert run_sweep(light, plan, sleep=sleep) == 5
        assert [c.args[0] for c in spy.call_args_list] == [60, 70, 80, 90, 100]
        assert sysfs.brightness('intel_backlight') == 100
        assert light.current() == 100

    def test_reuses_one_handle(self, light: Light, mocker):
        light.set(50)
        handle = light._handle
        run_sweep(light, SweepPlan(50, 0, 10, 0), sleep=Mock())
        assert light._handle is handle

    def test_sleeps_between_writes_only(self, light: Light):
        sleep = Mock()
        run_sweep(light, SweepPlan(50, 0, 10, 0.05), sleep=sleep)
        assert sleep.call_count == 9
        # sleep does not advance the clock here, so each wait is measured from the start
        assert all(0 < c.args[0] <= 0.05 * 9 for c in sleep.call_args_list)

    def test_no_op_does_nothing(self, light: Light, mocker):
        spy = mocker.spy(light, 'set')
        sleep = Mock()
        assert run_sweep(light, SweepPlan(50, 50, 10, 0.05), sleep=sleep) == 0
        spy.assert_not_called()
        sleep.assert_not_called()

    def test_write_failure_stops_sweep(self, light: Light, mocker):
        mocker.patch.object(light, 'set', Mock(side_effect=[60, WriteError('boom')]))
        with pytest.raises(WriteError):
            run_sweep(light, SweepPlan(50, 100, 5, 0), sleep=Mock())
        assert light.set.call_count == 2
