'''
Cross process mutual exclusion for brightness changes
'''
import fcntl
import logging
import os
from typing import Optional

from .exceptions import LockError, format_exc

_logger = logging.getLogger(__name__)

LOCK_FILE_MODE = 0o666


class InstanceLock:
    '''
    An exclusive advisory lock (`flock`) on a well known file.

    If another process holds the lock, `acquire` waits for it rather than
    failing, so invocations queue up behind each other (eg: a brightness
    hotkey being held down). The kernel drops the lock when the holding
    process exits, however it exits.

    The file is opened read only, which is all `flock` needs. It is created with
    `LOCK_FILE_MODE` so that every user on the machine can lock the same file.

    Args:
        path: the lock file. It and its parent directory are created if missing

    Example:
        ```python
        from sysfs_backlight.lock import InstanceLock

        with InstanceLock('/tmp/sysfs_backlight.lock'):
            ...  # no other process is changing the brightness
        ```
    '''

    def __init__(self, path: str):
        self.path = path
        self._fd: Optional[int] = None
        self._logger = _logger.getChild(self.__class__.__name__)

    @property
    def locked(self) -> bool:
        '''Whether this instance currently holds the lock'''
        return self._fd is not None

    def _open(self) -> int:
        try:
            return os.open(self.path, os.O_RDONLY)
        except FileNotFoundError:
            pass

        try:
            fd = os.open(self.path, os.O_RDONLY | os.O_CREAT | os.O_EXCL, LOCK_FILE_MODE)
        except FileExistsError:
            # another process created it first
            return os.open(self.path, os.O_RDONLY)
        try:
            # the mode given to `os.open` is masked by the umask
            os.fchmod(fd, LOCK_FILE_MODE)
        except OSError:
            os.close(fd)
            raise
        self._logger.debug(f'created {self.path}')
        return fd

    def acquire(self):
        '''
        Block until the lock is held by this instance.

        Raises:
            LockError: if the lock file cannot be opened or locked.
                Contention with another process is never an error
        '''
        if self._fd is not None:
            return

        try:
            directory = os.path.dirname(os.path.abspath(self.path))
            os.makedirs(directory, exist_ok=True)
            fd = self._open()
        except OSError as e:
            raise LockError(f'failed to open lock file {self.path} ({e})') from e

        try:
            try:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
            except BlockingIOError:
                self._logger.debug(f'{self.path} is held by another process, waiting')
                fcntl.flock(fd, fcntl.LOCK_EX)
        except OSError as e:
            os.close(fd)
            self._logger.error(f'failed to lock {self.path} - {format_exc(e)}')
            raise LockError(f'failed to lock {self.path} ({e})') from e

        self._fd = fd
        self._logger.debug(f'acquired {self.path}')

    def release(self):
        '''Release the lock. Does nothing if it is not held'''
        fd, self._fd = self._fd, None
        if fd is None:
            return
        try:
            fcntl.flock(fd, fcntl.LOCK_UN)
        finally:
            # closing the file would release the lock regardless
            os.close(fd)
        self._logger.debug(f'released {self.path}')

    def __enter__(self) -> 'InstanceLock':
        self.acquire()
        return self

    def __exit__(self, *_):
        self.release()
