'''
Saving and restoring brightness values between invocations
'''
import logging
import os
import tempfile
from typing import Dict

from .exceptions import (DeviceReadError, NoSavedStateError, ParseError,
                         WriteError, format_exc)
from .helpers import parse_raw
from .linux import Light
from .types import DeviceIdentifier, RawValue

_logger = logging.getLogger(__name__)


class StateStore:
    '''
    A small line oriented file mapping device names to raw brightness values.

    Each line holds one device, eg: `intel_backlight 19200`. Writes go to a
    temporary file in the same directory which is then renamed over the
    original, so the file is never seen half written.

    Args:
        path: location of the state file. Created on first save
    '''

    def __init__(self, path: str):
        self.path = path
        self._logger = _logger.getChild(self.__class__.__name__)

    def load(self) -> Dict[DeviceIdentifier, RawValue]:
        '''
        Returns:
            Every saved entry. Empty if nothing has been saved yet

        Raises:
            DeviceReadError: if the state file exists but cannot be read
            ParseError: if a line is malformed
        '''
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                lines = f.read().splitlines()
        except FileNotFoundError:
            return {}
        except (OSError, UnicodeDecodeError) as e:
            raise DeviceReadError(f'failed to read state file {self.path}') from e

        state = {}
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                device, value = line.rsplit(None, 1)
                state[device.strip()] = parse_raw(value)
            except (ValueError, ParseError) as e:
                raise ParseError(
                    f'malformed entry on line {line_number} of {self.path}: {line!r}') from e
        return state

    def get(self, device: DeviceIdentifier) -> RawValue:
        '''
        Raises:
            NoSavedStateError: if nothing is saved for `device`
        '''
        state = self.load()
        if device not in state:
            raise NoSavedStateError(f'no saved brightness for {device!r}')
        return state[device]

    def save(self, light: Light) -> RawValue:
        '''
        Record the light's current raw value, replacing any earlier entry for it.

        Returns:
            The value that was saved

        Raises:
            WriteError: if the state file cannot be written
        '''
        state = self.load()
        state[light.name] = light.current()
        self._write(state)
        self._logger.debug(f'saved {light.name}={light.current()} to {self.path}')
        return light.current()

    def restore(self, light: Light) -> RawValue:
        '''
        Write the saved value back to the light.

        Returns:
            The value that was written (clamped to the light's max brightness)

        Raises:
            NoSavedStateError: if nothing is saved for the light
        '''
        value = self.get(light.name)
        self._logger.debug(f'restoring {light.name}={value}')
        return light.set(value)

    def _write(self, state: Dict[DeviceIdentifier, RawValue]):
        directory = os.path.dirname(os.path.abspath(self.path))
        content = ''.join(f'{device} {value}\n' for device, value in state.items())
        tmp = None
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp = tempfile.mkstemp(
                dir=directory, prefix=f'.{os.path.basename(self.path)}.', suffix='.tmp')
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as e:
            self._logger.error(f'failed to write state file {self.path} - {format_exc(e)}')
            if tmp is not None and os.path.exists(tmp):
                os.unlink(tmp)
            raise WriteError(f'failed to write state file {self.path}') from e
