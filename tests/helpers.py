from pathlib import Path
from typing import Union

from sysfs_backlight.config import Config

Value = Union[int, str]


class FakeSysfs:
    '''
    A throwaway `/sys/class` tree. Values are written as-is so that broken
    entries (eg: non-numeric content) can be created too.
    '''

    def __init__(self, root: Path):
        self.root = root
        self.backlight_dir = root / 'class' / 'backlight'
        self.led_dir = root / 'class' / 'leds'
        self.backlight_dir.mkdir(parents=True)
        self.led_dir.mkdir(parents=True)
        self.config = Config(
            lock_file=str(root / 'run' / 'sysfs_backlight.lock'),
            state_file=str(root / 'data' / 'sysfs_backlight' / 'brightness.save'),
            backlight_dir=str(self.backlight_dir),
            led_dir=str(self.led_dir)
        )

    @staticmethod
    def _add(root: Path, name: str, current: Value, max_brightness: Value) -> Path:
        device = root / name
        device.mkdir()
        if current is not None:
            (device / 'brightness').write_text(f'{current}\n')
        if max_brightness is not None:
            (device / 'max_brightness').write_text(f'{max_brightness}\n')
        return device

    def add_backlight(self, name: str, current: Value = 50, max_brightness: Value = 100) -> Path:
        return self._add(self.backlight_dir, name, current, max_brightness)

    def add_led(self, name: str, current: Value = 0, max_brightness: Value = 1) -> Path:
        return self._add(self.led_dir, name, current, max_brightness)

    def brightness(self, name: str) -> int:
        '''Read back what was written to a device's brightness file'''
        for root in (self.backlight_dir, self.led_dir):
            path = root / name / 'brightness'
            if path.exists():
                return int(path.read_text())
        raise FileNotFoundError(name)
