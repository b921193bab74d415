'''
Contains globally applicable configuration variables and the `Config` object
holding the well-known filesystem locations used by the library.
'''
import os
from dataclasses import dataclass
from functools import wraps
from typing import Callable


def default_params(func: Callable):
    '''
    This decorator sets default kwarg values using global configuration variables.
    '''
    @wraps(func)
    def wrapper(*args, **kwargs):
        if kwargs.get('steps') is None:
            kwargs['steps'] = SWEEP_STEPS
        if kwargs.get('delay') is None:
            kwargs['delay'] = SWEEP_DELAY
        return func(*args, **kwargs)
    return wrapper


SWEEP_STEPS: int = 20
'''
Default number of writes used to sweep from one brightness level to another.
'''

SWEEP_DELAY: float = 0.025
'''
Default delay (in seconds) between each write of a sweep.
'''

ADJUST_AMOUNT: int = 5
'''
Default percentage used by the `inc` and `dec` commands when no amount is given.
'''

APP_NAME = 'sysfs_backlight'

LOCK_FILE = f'/tmp/{APP_NAME}.lock'
'''
Default lock file. Every invocation, whatever its user or environment, must
agree on this path for the lock to serialize them.
'''


@dataclass(frozen=True)
class Config:
    '''
    Locations the library reads from and writes to.

    Passed explicitly to discovery, locking and persistence so that each can be
    pointed at a scratch directory.
    '''
    lock_file: str
    '''Path of the file that is `flock`ed while a brightness change is in progress.
    Shared by all users, see `LOCK_FILE`'''
    state_file: str
    '''Path of the file holding saved brightness values'''
    backlight_dir: str = '/sys/class/backlight'
    '''sysfs class root for backlight devices'''
    led_dir: str = '/sys/class/leds'
    '''sysfs class root for LED devices'''

    @classmethod
    def from_env(cls) -> 'Config':
        '''
        Build the default configuration for the current user.

        The lock is always `LOCK_FILE`, independent of the user's session, and
        the state file lives in `$XDG_DATA_HOME` (or `~/.local/share`).
        `SYSFS_BACKLIGHT_LOCK_FILE` and `SYSFS_BACKLIGHT_STATE_FILE` override
        either location.
        '''
        data_dir = os.environ.get('XDG_DATA_HOME') or os.path.join(
            os.path.expanduser('~'), '.local', 'share')

        return cls(
            lock_file=os.environ.get('SYSFS_BACKLIGHT_LOCK_FILE', LOCK_FILE),
            state_file=os.environ.get(
                'SYSFS_BACKLIGHT_STATE_FILE',
                os.path.join(data_dir, APP_NAME, 'brightness.save')
            )
        )
