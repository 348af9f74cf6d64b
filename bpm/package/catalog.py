"""
Binary catalog

SQLite content store that archives the bytes of every installed binary,
keyed by its file name. A later install of a same-named binary replaces the
earlier entry, the same way the flat bins directory does.
"""

import time
import sqlite3
import logging
from contextlib import closing
from pathlib import Path
from typing import Union

from ..exceptions import CatalogError

logger = logging.getLogger('BPM.package.catalog')

SCHEMA = """
CREATE TABLE IF NOT EXISTS binaries (
    name TEXT PRIMARY KEY,
    content BLOB NOT NULL,
    size INTEGER NOT NULL,
    recorded_at REAL NOT NULL
)
"""


class BinaryCatalog:
    """Archive of installed binaries in packages.db"""

    def __init__(self, catalog_path: Union[str, Path]):
        self.catalog_path = Path(catalog_path)

    def record(self, name: str, data: bytes) -> None:
        """Store (or replace) the content of a binary"""
        try:
            self.catalog_path.parent.mkdir(parents=True, exist_ok=True)
            with closing(sqlite3.connect(self.catalog_path)) as conn:
                with conn:
                    conn.execute(SCHEMA)
                    conn.execute(
                        "INSERT OR REPLACE INTO binaries (name, content, size, recorded_at) "
                        "VALUES (?, ?, ?, ?)",
                        (name, sqlite3.Binary(data), len(data), time.time())
                    )
        except (sqlite3.Error, OSError) as e:
            raise CatalogError(f"Failed to record {name} in {self.catalog_path}: {e}") from e

        logger.debug(f"Cataloged {name} ({len(data)} bytes)")
