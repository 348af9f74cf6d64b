"""
Advisory lock on the installed-state store

Every load-mutate-save cycle on installed.json runs while holding this lock
so that two bpm processes cannot lose each other's updates.
"""

import os
import sys
import time
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from ..exceptions import LockTimeout

logger = logging.getLogger('BPM.package.locking')


def _try_lock(lock_file) -> bool:
    try:
        if sys.platform == 'win32':
            import msvcrt
            lock_file.seek(0)
            msvcrt.locking(lock_file.fileno(), msvcrt.LK_NBLCK, 1)
        else:
            import fcntl
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        return True
    except OSError:
        return False


def _unlock(lock_file) -> None:
    if sys.platform == 'win32':
        import msvcrt
        lock_file.seek(0)
        msvcrt.locking(lock_file.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


@contextmanager
def store_lock(lock_path: Union[str, Path], timeout: float = 5.0, poll_interval: float = 0.1):
    """Acquire an exclusive lock on the store, retrying until timeout"""
    lock_acquired = False
    lock_file = None

    os.makedirs(os.path.dirname(os.path.abspath(lock_path)), exist_ok=True)

    try:
        lock_file = open(lock_path, 'a+')
        deadline = time.monotonic() + timeout
        while True:
            if _try_lock(lock_file):
                lock_acquired = True
                break
            if time.monotonic() >= deadline:
                break
            # Another process has the lock, wait and retry
            time.sleep(poll_interval)

        if not lock_acquired:
            raise LockTimeout(f"Could not acquire store lock {lock_path} within {timeout}s")

        logger.debug(f"Acquired store lock {lock_path}")
        yield

    finally:
        if lock_file:
            if lock_acquired:
                _unlock(lock_file)
                logger.debug(f"Released store lock {lock_path}")
            lock_file.close()
