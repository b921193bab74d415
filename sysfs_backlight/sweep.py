'''
Smooth, multi-step brightness transitions
'''
import logging
import time
from dataclasses import dataclass
from typing import Callable, Generator, Optional

from . import config
from .exceptions import InvalidInputError
from .helpers import _div_round_half_up
from .linux import Light
from .types import RawValue

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepPlan:
    '''A transition from one raw value to another, split into evenly spaced steps'''
    start_raw: RawValue
    end_raw: RawValue
    step_count: int
    step_delay: float
    '''Seconds between the start of each write'''

    def values(self) -> Generator[RawValue, None, None]:
        '''
        Yields the raw values to write, excluding `start_raw` and always ending
        on exactly `end_raw`.

        Step `i` lands on `start_raw + (end_raw - start_raw) * i / step_count`,
        rounded half away from zero. The difference is signed so fading
        downwards works the same way as fading upwards, and each step is
        computed from the start point rather than accumulated, so rounding
        error never builds up. Repeated values (when there are more steps than
        raw units to cover) are skipped.

        Example:
            ```python
            list(SweepPlan(0, 10, 4, 0).values())
            # [3, 5, 8, 10]
            ```
        '''
        difference = self.end_raw - self.start_raw
        if difference == 0:
            return

        last_yielded = self.start_raw
        for i in range(1, self.step_count + 1):
            value = self.start_raw + _div_round_half_up(difference * i, self.step_count)
            if value == last_yielded:
                continue
            yield value
            last_yielded = value

    def __len__(self) -> int:
        return sum(1 for _ in self.values())


@config.default_params
def plan_sweep(
    start: RawValue,
    end: RawValue,
    max_raw: Optional[RawValue] = None,
    *,
    steps: Optional[int] = None,
    delay: Optional[float] = None
) -> SweepPlan:
    '''
    Validate the parameters of a sweep and build a `SweepPlan`

    Args:
        start: the raw value to start from
        end: the raw value to finish on
        max_raw: if given, both `start` and `end` must be no larger than this
        steps: how many writes to split the sweep into.
            Defaults to `.config.SWEEP_STEPS`
        delay: seconds to wait between writes. Defaults to `.config.SWEEP_DELAY`

    Raises:
        InvalidInputError: if any parameter is out of range
    '''
    for name, value in (('start', start), ('end', end)):
        if value < 0:
            raise InvalidInputError(f'sweep {name} must not be negative, got {value}')
        if max_raw is not None and value > max_raw:
            raise InvalidInputError(
                f'sweep {name} must not exceed the max brightness of {max_raw}, got {value}')
    if steps < 1:  # type: ignore[operator]
        raise InvalidInputError(f'a sweep needs at least one step, got {steps}')
    if delay < 0:  # type: ignore[operator]
        raise InvalidInputError(f'sweep delay must not be negative, got {delay}')

    plan = SweepPlan(start, end, steps, delay)  # type: ignore[arg-type]
    _logger.debug(f'sweep plan {plan}')
    return plan


def run_sweep(light: Light, plan: SweepPlan, sleep: Callable[[float], None] = time.sleep) -> int:
    '''
    Write each value of a sweep to a light, blocking until it completes.

    The delay is measured from the start of one write to the start of the next,
    so slow writes do not stretch the sweep. There is no delay after the final
    write.

    Args:
        light: the light to adjust
        plan: the sweep to perform
        sleep: function used to wait between writes

    Returns:
        The number of values written

    Raises:
        PermissionDeniedError: see `Light.set`
        WriteError: see `Light.set`
    '''
    written = 0
    next_change_start_time = time.monotonic()
    for value in plan.values():
        if written:
            next_change_start_time += plan.step_delay
            sleep_time = next_change_start_time - time.monotonic()
            # Skip sleep if the scheduled time has already passed
            if sleep_time > 0:
                sleep(sleep_time)
        light.set(value)
        written += 1
    return written
