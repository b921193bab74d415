import logging
import os
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ._version import __author__, __version__  # noqa: F401
from . import config
from .config import Config
from .controller import BrightnessController
from .exceptions import (BacklightError, DeviceNotFoundError, ErrorKind,  # noqa: F401
                         InvalidInputError, LockError, NoSavedStateError)
from .linux import Light, LedName, ScanResult, scan_lights as _scan_lights
from .lock import InstanceLock
from .persistence import StateStore
from .types import DeviceIdentifier, DeviceKind, IntPercentage, PriorityTier, RawValue  # noqa: F401

_logger = logging.getLogger(__name__)
_logger.addHandler(logging.NullHandler())


def scan_lights(config: Optional[Config] = None) -> ScanResult:
    '''
    Enumerate all lights, including the ones that failed to be read.

    Args:
        config: the locations to use. Defaults to `Config.from_env()`

    Returns:
        `.linux.ScanResult`, the lights sorted by priority plus a list of
        `(path, error)` pairs for any device that was skipped
    '''
    return _scan_lights(config or Config.from_env())


def list_lights(config: Optional[Config] = None) -> List[Light]:
    '''
    List every usable light, highest priority first

    Args:
        config: the locations to use. Defaults to `Config.from_env()`

    Raises:
        DeviceNotFoundError: if no usable lights were found

    Example:
        ```python
        import sysfs_backlight

        for light in sysfs_backlight.list_lights():
            print(light.name, light.kind.value, f'{light.current_percent()}%')
        ```
    '''
    result = scan_lights(config)
    if not result.lights:
        msg = 'no qualifying lights detected'
        if result.failures:
            msg += f' ({len(result.failures)} device(s) could not be read)'
        raise DeviceNotFoundError(msg)
    return result.lights


def get_light(device: Optional[DeviceIdentifier] = None, config: Optional[Config] = None) -> Light:
    '''
    Find a single light.

    Args:
        device: the name of the light. If unspecified, the highest priority
            light is returned
        config: the locations to use. Defaults to `Config.from_env()`

    Raises:
        DeviceNotFoundError: if the light does not exist, or if no lights exist at all
        DeviceReadError: if the named light exists but could not be read
        ParseError: if the named light exists but holds invalid values

    Example:
        ```python
        import sysfs_backlight

        with sysfs_backlight.get_light('intel_backlight') as light:
            light.set(light.max())
        ```
    '''
    result = scan_lights(config)
    if device is None:
        if not result.lights:
            raise DeviceNotFoundError('no qualifying lights detected')
        return result.lights[0]

    for light in result.lights:
        if light.name == device:
            return light

    # the device may exist but have failed to be read, which is more useful to report
    for path, error in result.failures:
        if os.path.basename(path) == device:
            raise error

    raise DeviceNotFoundError(f'no light found with the name {device!r}')


def get_brightness(device: Optional[DeviceIdentifier] = None, config: Optional[Config] = None) -> IntPercentage:
    '''
    Returns the current brightness of a light as a percentage.
    Read only, so no lock is taken.
    '''
    return get_light(device, config).current_percent()


@config.default_params
def increase_brightness(
    amount: IntPercentage,
    device: Optional[DeviceIdentifier] = None,
    sweep: bool = False,
    config: Optional[Config] = None,
    *,
    steps: Optional[int] = None,
    delay: Optional[float] = None
) -> IntPercentage:
    '''
    Increase the brightness of a light by `amount` percent.

    Args:
        amount: how much to increase the brightness by
        device: the light to adjust. Defaults to the highest priority light
        sweep: fade to the new value instead of jumping straight to it
        config: the locations to use. Defaults to `Config.from_env()`
        steps: number of writes when sweeping. Defaults to `.config.SWEEP_STEPS`
        delay: seconds between writes when sweeping. Defaults to `.config.SWEEP_DELAY`

    Returns:
        The new brightness percentage

    Example:
        ```python
        import sysfs_backlight

        # increase brightness by 10%
        sysfs_backlight.increase_brightness(10)

        # smoothly increase nvidia_0's brightness by 5%
        sysfs_backlight.increase_brightness(5, device='nvidia_0', sweep=True)
        ```
    '''
    with _locked_light(device, config) as light:
        return BrightnessController(light).increase(amount, sweep=sweep, steps=steps, delay=delay)


@config.default_params
def decrease_brightness(
    amount: IntPercentage,
    device: Optional[DeviceIdentifier] = None,
    sweep: bool = False,
    config: Optional[Config] = None,
    *,
    steps: Optional[int] = None,
    delay: Optional[float] = None
) -> IntPercentage:
    '''Decrease the brightness of a light by `amount` percent. See `increase_brightness`'''
    with _locked_light(device, config) as light:
        return BrightnessController(light).decrease(amount, sweep=sweep, steps=steps, delay=delay)


def set_brightness(
    value: IntPercentage,
    device: Optional[DeviceIdentifier] = None,
    config: Optional[Config] = None
) -> IntPercentage:
    '''
    Set the brightness of a light to `value` percent

    Raises:
        InvalidInputError: if `value` is not within [0, 100]
    '''
    with _locked_light(device, config) as light:
        return BrightnessController(light).set_absolute(value)


def toggle(device: Optional[DeviceIdentifier] = None, config: Optional[Config] = None) -> IntPercentage:
    '''
    Switch a light fully on if it is below half brightness, otherwise switch it off.
    Mostly useful for LEDs.
    '''
    with _locked_light(device, config) as light:
        light.toggle()
        return light.current_percent()


def save(device: Optional[DeviceIdentifier] = None, config: Optional[Config] = None) -> RawValue:
    '''
    Save the current raw brightness of a light so it can be restored later

    Returns:
        The raw value that was saved
    '''
    config = config or Config.from_env()
    with _locked_light(device, config) as light:
        return StateStore(config.state_file).save(light)


def restore(device: Optional[DeviceIdentifier] = None, config: Optional[Config] = None) -> IntPercentage:
    '''
    Restore the brightness of a light to the value recorded by `save`

    Raises:
        NoSavedStateError: if the light has never been saved
    '''
    config = config or Config.from_env()
    with _locked_light(device, config) as light:
        StateStore(config.state_file).restore(light)
        return light.current_percent()


@contextmanager
def _locked_light(device: Optional[DeviceIdentifier], config: Optional[Config]) -> Iterator[Light]:
    '''
    Take the instance lock, then resolve a light. The light's write handle is
    closed before the lock is released.
    '''
    config = config or Config.from_env()
    with InstanceLock(config.lock_file):
        with get_light(device, config) as light:
            yield light
