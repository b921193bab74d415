'''
Percentage based brightness adjustments built on top of `.linux.Light`
'''
import logging
from typing import Callable, Optional

from .exceptions import InvalidInputError
from .helpers import clamp, to_raw
from .linux import Light
from .sweep import plan_sweep, run_sweep
from .types import IntPercentage, RawValue

_logger = logging.getLogger(__name__)


def _check_amount(value: int, what: str):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f'{what} must be an integer, not {type(value).__name__}')
    if value < 0:
        raise InvalidInputError(f'{what} must not be negative, got {value}')


def _check_percentage(value: int, what: str):
    _check_amount(value, what)
    if value > 100:
        raise InvalidInputError(f'{what} must be between 0 and 100, got {value}')


class BrightnessController:
    '''
    Adjusts a light in percentage space.

    All percentages are converted to raw values with `.helpers.to_raw` and
    read back with `Light.current_percent`, so the controller never stores a
    percentage of its own.

    Args:
        light: the light to control
        sleep: passed through to `.sweep.run_sweep`
    '''

    def __init__(self, light: Light, sleep: Optional[Callable[[float], None]] = None):
        self.light = light
        self._sleep = sleep
        self._logger = _logger.getChild(self.__class__.__name__).getChild(light.name)

    def increase(
        self,
        delta_percent: IntPercentage,
        sweep: bool = False,
        steps: Optional[int] = None,
        delay: Optional[float] = None
    ) -> IntPercentage:
        '''
        Raise the brightness by `delta_percent`, stopping at 100%.

        Args:
            delta_percent: how much to add to the current percentage
            sweep: transition gradually instead of jumping straight to the new value
            steps: see `.sweep.plan_sweep`
            delay: see `.sweep.plan_sweep`

        Returns:
            The new brightness percentage

        Raises:
            InvalidInputError: if `delta_percent` is negative. Larger amounts
                than the remaining headroom just saturate
        '''
        _check_amount(delta_percent, 'increase amount')
        # never move against the requested direction when the current raw value
        # sits between two whole percentages
        target = min(100, self.light.current_percent() + delta_percent)
        return self._apply(max(self.light.current(), to_raw(target, self.light.max_raw)), sweep, steps, delay)

    def decrease(
        self,
        delta_percent: IntPercentage,
        sweep: bool = False,
        steps: Optional[int] = None,
        delay: Optional[float] = None
    ) -> IntPercentage:
        '''Lower the brightness by `delta_percent`, stopping at 0%. See `increase`'''
        _check_amount(delta_percent, 'decrease amount')
        target = max(0, self.light.current_percent() - delta_percent)
        return self._apply(min(self.light.current(), to_raw(target, self.light.max_raw)), sweep, steps, delay)

    def set_absolute(self, target_percent: IntPercentage) -> IntPercentage:
        '''
        Jump straight to `target_percent`. Never sweeps.

        Raises:
            InvalidInputError: if `target_percent` is not within [0, 100].
                The light is left untouched
        '''
        _check_percentage(target_percent, 'brightness')
        return self._apply(to_raw(target_percent, self.light.max_raw), sweep=False)

    def _apply(
        self,
        raw: RawValue,
        sweep: bool,
        steps: Optional[int] = None,
        delay: Optional[float] = None
    ) -> IntPercentage:
        raw = clamp(raw, 0, self.light.max_raw)
        start = self.light.current()
        if raw == start:
            self._logger.debug(f'already at {raw}, nothing to do')
            return self.light.current_percent()

        if sweep:
            plan = plan_sweep(start, raw, self.light.max_raw, steps=steps, delay=delay)
            if self._sleep is None:
                run_sweep(self.light, plan)
            else:
                run_sweep(self.light, plan, sleep=self._sleep)
        else:
            self.light.set(raw)

        self._logger.debug(f'{start} -> {self.light.current()}')
        return self.light.current_percent()
