"""Single-instance guard: an exclusive lock on a named lock file."""
from __future__ import annotations
import logging, os, platform

log = logging.getLogger(__name__)

IS_WIN = platform.system() == "Windows"

if IS_WIN:
    import msvcrt
else:
    import fcntl


class InstanceLock:
    """Held for the life of the process; the first acquirer wins.

    >>> with InstanceLock(path) as held:
    ...     if not held: sys.exit(1)
    """

    def __init__(self, path: str):
        self.path = path
        self._fd = None

    @property
    def held(self) -> bool:
        return self._fd is not None

    def acquire(self) -> bool:
        if self._fd is not None:
            return True
        fd = os.open(self.path, os.O_RDWR | os.O_CREAT, 0o644)
        try:
            if IS_WIN:
                msvcrt.locking(fd, msvcrt.LK_NBLCK, 1)
            else:
                fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            os.close(fd)
            log.info("Lock %s is held by another instance", self.path)
            return False
        os.ftruncate(fd, 0)
        os.write(fd, str(os.getpid()).encode())
        self._fd = fd
        return True

    def release(self) -> None:
        if self._fd is None:
            return
        try:
            if IS_WIN:
                os.lseek(self._fd, 0, os.SEEK_SET)
                msvcrt.locking(self._fd, msvcrt.LK_UNLCK, 1)
            else:
                fcntl.flock(self._fd, fcntl.LOCK_UN)
        except OSError as e:
            log.debug("Unlock failed: %s", e)
        finally:
            os.close(self._fd)
            self._fd = None

    def __enter__(self) -> bool:
        return self.acquire()

    def __exit__(self, *exc) -> None:
        self.release()
