"""
Installed-state store

installed.json maps package name -> {repo, version, binaries}. Every read
loads the document fresh and every write replaces it wholesale through a
temporary file and an atomic rename.
"""

import os
import json
import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, Optional, Union

from pydantic import TypeAdapter, ValidationError

from ..config import BpmConfig
from ..exceptions import StateCorrupt
from .locking import store_lock
from .models import InstalledRecord, InstalledState

logger = logging.getLogger('BPM.package.state')

_RECORDS = TypeAdapter(Dict[str, InstalledRecord])


class InstalledStateStore:
    """Persistent installed-state document under the store root"""

    def __init__(self, path: Union[str, Path], lock_path: Optional[Union[str, Path]] = None,
                 lock_timeout: float = 5.0):
        self.path = Path(path)
        self.lock_path = Path(lock_path) if lock_path else Path(f"{self.path}.lock")
        self.lock_timeout = lock_timeout

    @classmethod
    def from_config(cls, config: BpmConfig) -> 'InstalledStateStore':
        return cls(config.state_path, config.lock_path, config.lock_timeout)

    def load(self) -> InstalledState:
        """Load the state, empty if no document exists yet"""
        if not self.path.exists():
            return InstalledState()

        try:
            with open(self.path, 'rb') as f:
                content = f.read()
        except OSError as e:
            raise StateCorrupt(f"Cannot read installed state {self.path}: {e}") from e

        # An empty document is corruption too; saves never write one
        try:
            records = _RECORDS.validate_python(json.loads(content))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError) as e:
            raise StateCorrupt(f"Installed state {self.path} is corrupt: {e}") from e

        return InstalledState(records)

    def save(self, state: InstalledState) -> None:
        """Write the whole document atomically"""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(state.to_dict(), indent=2)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

        logger.debug(f"Saved {len(state)} installed records to {self.path}")

    @contextmanager
    def transaction(self) -> Iterator[InstalledState]:
        """Load, yield for mutation and save, all under the store lock"""
        with store_lock(self.lock_path, timeout=self.lock_timeout):
            state = self.load()
            yield state
            self.save(state)
