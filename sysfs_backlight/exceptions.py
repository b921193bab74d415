from enum import Enum
from typing import Optional


def format_exc(e: Exception) -> str:
    '''@private'''
    return f'{type(e).__name__}: {e}'


class ErrorKind(Enum):
    '''Every failure the library can surface falls into one of these categories'''
    DEVICE_READ = 'device read'
    PARSE_ERROR = 'parse error'
    WRITE = 'write'
    PERMISSION_DENIED = 'permission denied'
    DEVICE_NOT_FOUND = 'device not found'
    INVALID_INPUT = 'invalid input'
    NO_SAVED_STATE = 'no saved state'
    LOCK = 'lock'


class BacklightError(Exception):
    '''
    Generic error class designed to make catching errors under one umbrella easy.

    Every subclass sets `kind` so that callers (eg: the CLI) can branch on the
    category of failure without matching on class names.
    '''
    kind: ErrorKind
    default_tip: Optional[str] = None

    def __init__(self, message: str = '', tip: Optional[str] = None):
        super().__init__(message)
        self.message: str = message
        self.tip: Optional[str] = tip if tip is not None else self.default_tip


class DeviceReadError(BacklightError):
    '''A sysfs attribute could not be read'''
    kind = ErrorKind.DEVICE_READ


class ParseError(BacklightError, ValueError):
    '''A file held something other than the expected ASCII decimal value'''
    kind = ErrorKind.PARSE_ERROR


class WriteError(BacklightError):
    '''Writing a new brightness value failed'''
    kind = ErrorKind.WRITE


class PermissionDeniedError(WriteError):
    '''
    The kernel refused the write because the user lacks privileges.

    Subclasses `WriteError` so code that only cares about "the write failed"
    can catch both.
    '''
    kind = ErrorKind.PERMISSION_DENIED
    default_tip = (
        'Make sure you have write permission to the brightness file. '
        'Installing udev rules that give the `video` group write access and '
        'adding your user to that group is the usual fix, '
        'see https://wiki.archlinux.org/title/Backlight#Hardware_interfaces'
    )


class DeviceNotFoundError(BacklightError, LookupError):
    '''Could not find a valid light'''
    kind = ErrorKind.DEVICE_NOT_FOUND


class InvalidInputError(BacklightError, ValueError):
    '''A caller supplied value is out of range'''
    kind = ErrorKind.INVALID_INPUT


class NoSavedStateError(BacklightError):
    '''Restore was requested for a device that has never been saved'''
    kind = ErrorKind.NO_SAVED_STATE
    default_tip = "Try using 'save' first"


class LockError(BacklightError):
    '''
    The instance lock could not be acquired for a reason other than another
    process holding it.
    '''
    kind = ErrorKind.LOCK
