import logging
import os
from dataclasses import dataclass, field
from typing import BinaryIO, List, NamedTuple, Optional, Tuple

from .config import Config
from .exceptions import (BacklightError, DeviceReadError, PermissionDeniedError,
                         WriteError, format_exc)
from .helpers import clamp, percent_of, read_raw
from .types import DeviceIdentifier, DeviceKind, IntPercentage, PriorityTier, RawValue

_logger = logging.getLogger(__name__)

CURRENT_FILE = 'brightness'
MAX_FILE = 'max_brightness'

INTEGRATED_GPU_PREFIXES = ('intel_', 'amdgpu_bl', 'radeon_bl')
DEDICATED_GPU_PREFIXES = ('nvidia',)
ACPI_VIDEO_PREFIXES = ('acpi_video',)


class LedName(NamedTuple):
    '''
    The parts of an LED name following the kernel's
    `devicename:color:function` naming convention.

    Any part that the name does not provide is `None`. A name with a single
    `:` only yields a function, and a name without any `:` yields nothing.
    '''
    device: Optional[str]
    color: Optional[str]
    function: Optional[str]

    @classmethod
    def parse(cls, name: str) -> 'LedName':
        '''
        Example:
            ```python
            from sysfs_backlight.linux import LedName

            LedName.parse('input3::capslock')
            # LedName(device='input3', color=None, function='capslock')
            ```
        '''
        parts = name.rsplit(':', 2)
        if len(parts) == 1:
            return cls(None, None, None)
        if len(parts) == 2:
            return cls(None, None, parts[1] or None)
        return cls(*(part or None for part in parts))


def classify(name: DeviceIdentifier, kind: DeviceKind) -> PriorityTier:
    '''
    Work out the `PriorityTier` of a light from its name.

    Args:
        name: the light's directory name, eg: `intel_backlight`
        kind: the sysfs class the light was found under
    '''
    if kind == DeviceKind.LED:
        return PriorityTier.LED
    if name.startswith(INTEGRATED_GPU_PREFIXES):
        return PriorityTier.INTEGRATED_GPU
    if name.startswith(DEDICATED_GPU_PREFIXES):
        return PriorityTier.DEDICATED_GPU
    if name.startswith(ACPI_VIDEO_PREFIXES):
        return PriorityTier.ACPI_VIDEO
    return PriorityTier.UNKNOWN


@dataclass
class Light():
    '''
    Represents a single brightness controllable device under `/sys/class`.

    Backlights and LEDs share this class, `kind` tells them apart.
    The current value is a snapshot taken at discovery (or on the last
    `reload`/`set`) and is never refreshed implicitly.

    The file handle used for writing is opened on the first `set` and reused
    afterwards, so sweeps do not reopen the file for every step. Use the light
    as a context manager (or call `close`) to release it.
    '''
    name: DeviceIdentifier
    '''The name of the light's directory, eg: `intel_backlight`'''
    kind: DeviceKind
    '''Which sysfs class the light belongs to'''
    path: str
    '''The light's control directory'''
    max_raw: RawValue
    '''The value of `max_brightness`. Read once and never refreshed'''
    current_raw: RawValue
    '''The last known value of `brightness`'''
    tier: PriorityTier = None  # type: ignore[assignment]
    '''Priority used when picking a default light. Derived from the name if not given'''

    _handle: Optional[BinaryIO] = field(default=None, init=False, repr=False, compare=False)
    _logger: logging.Logger = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.tier is None:
            self.tier = classify(self.name, self.kind)
        self._logger = _logger.getChild(self.__class__.__name__).getChild(self.name)

    @classmethod
    def from_path(cls, kind: DeviceKind, path: str) -> 'Light':
        '''
        Read a light's current and max values from its control directory.

        Raises:
            DeviceReadError: if either attribute cannot be read, or the
                max brightness is zero
            ParseError: if either attribute is not a decimal integer
        '''
        name = os.path.basename(os.path.normpath(path))
        max_raw = read_raw(os.path.join(path, MAX_FILE))
        if max_raw == 0:
            raise DeviceReadError(f'{name} reports a max brightness of 0')
        current_raw = read_raw(os.path.join(path, CURRENT_FILE))
        return cls(
            name=name,
            kind=kind,
            path=path,
            max_raw=max_raw,
            current_raw=clamp(current_raw, 0, max_raw)
        )

    @property
    def brightness_file(self) -> str:
        return os.path.join(self.path, CURRENT_FILE)

    @property
    def led_name(self) -> Optional[LedName]:
        '''The parsed LED name, or None if this light is not an LED'''
        if self.kind != DeviceKind.LED:
            return None
        return LedName.parse(self.name)

    def current(self) -> RawValue:
        '''The last known raw brightness. No I/O is performed, see `reload`'''
        return self.current_raw

    def max(self) -> RawValue:
        return self.max_raw

    def current_percent(self) -> IntPercentage:
        return percent_of(self.current_raw, self.max_raw)

    def device_path(self) -> str:
        return self.path

    def writable(self) -> bool:
        '''Whether the current user may write to the brightness file'''
        return os.access(self.brightness_file, os.W_OK)

    def reload(self) -> RawValue:
        '''
        Re-read the current brightness from sysfs. The max brightness is not
        re-read, it is assumed to never change.

        Returns:
            The refreshed raw value

        Raises:
            DeviceReadError: if the brightness file cannot be read
            ParseError: if the brightness file does not contain a valid value
        '''
        self.current_raw = clamp(read_raw(self.brightness_file), 0, self.max_raw)
        return self.current_raw

    def set(self, raw: RawValue) -> RawValue:
        '''
        Write a new raw brightness value. Values outside of [0, max] are
        clamped rather than rejected.

        Args:
            raw: the new brightness value

        Returns:
            The value that was actually written

        Raises:
            PermissionDeniedError: if the user is not allowed to write to the device
            WriteError: if the write fails for any other reason
        '''
        value = clamp(int(raw), 0, self.max_raw)
        try:
            handle = self._get_handle()
            handle.seek(0)
            handle.write(str(value).encode('ascii'))
            handle.truncate()
        except PermissionError as e:
            raise PermissionDeniedError(
                f'permission denied writing to {self.brightness_file}') from e
        except OSError as e:
            raise WriteError(
                f'failed to write {value} to {self.brightness_file} ({e})') from e

        self._logger.debug(f'wrote {value} (was {self.current_raw})')
        self.current_raw = value
        return value

    def toggle(self, threshold: Optional[RawValue] = None) -> RawValue:
        '''
        Turn the light fully on if it is below `threshold`, otherwise turn it off.

        Args:
            threshold: raw value at or above which the light counts as "on".
                Defaults to half of the max brightness

        Returns:
            The value that was written
        '''
        if threshold is None:
            lit = self.current_raw * 2 >= self.max_raw
        else:
            lit = self.current_raw >= threshold
        return self.set(0 if lit else self.max_raw)

    def _get_handle(self) -> BinaryIO:
        if self._handle is None:
            # unbuffered so that the kernel's verdict on a value surfaces from `write`
            self._handle = open(self.brightness_file, 'wb', buffering=0)
            self._logger.debug(f'opened {self.brightness_file} for writing')
        return self._handle

    def close(self):
        '''Release the cached write handle, if one is open'''
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.close()

    def __enter__(self) -> 'Light':
        return self

    def __exit__(self, *_):
        self.close()


class ScanResult(NamedTuple):
    '''The outcome of `scan_lights`'''
    lights: List[Light]
    '''Usable lights, sorted by `PriorityTier` (stable within a tier)'''
    failures: List[Tuple[str, BacklightError]]
    '''The path and error of every entry that could not be read'''


def _scan_class_dir(
    root: str, kind: DeviceKind, failures: List[Tuple[str, BacklightError]]
) -> List[Light]:
    try:
        entries = sorted(os.listdir(root))
    except FileNotFoundError:
        _logger.debug(f'{root} does not exist, no {kind.value} devices')
        return []
    except OSError as e:
        _logger.warning(f'error listing {root} - {format_exc(e)}')
        error = DeviceReadError(f'failed to list {root}')
        error.__cause__ = e
        failures.append((root, error))
        return []

    lights = []
    for entry in entries:
        path = os.path.join(root, entry)
        try:
            lights.append(Light.from_path(kind, path))
        except BacklightError as e:
            _logger.warning(f'skipping {kind.value} device {entry!r} - {format_exc(e)}')
            failures.append((path, e))
    return lights


def scan_lights(config: Config) -> ScanResult:
    '''
    Enumerate every backlight and LED device and sort them by priority.

    Devices that cannot be read are skipped and reported in
    `ScanResult.failures` instead of aborting the scan.

    Args:
        config: where to look for devices

    Returns:
        `ScanResult`
    '''
    failures: List[Tuple[str, BacklightError]] = []
    lights = _scan_class_dir(config.backlight_dir, DeviceKind.BACKLIGHT, failures)
    lights += _scan_class_dir(config.led_dir, DeviceKind.LED, failures)
    # `sorted` is stable so discovery order is kept within each tier
    lights = sorted(lights, key=lambda light: light.tier)
    _logger.debug(f'found lights: {[light.name for light in lights]}')
    return ScanResult(lights, failures)
