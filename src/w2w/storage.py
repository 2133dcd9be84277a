"""
Durable Key-Value Storage for w2w

Each named slot is a text file inside the data directory. Writes go through
a temporary file and an atomic rename, and the previous contents are kept
as a ``.bak`` file for recovery.
"""

import logging
from pathlib import Path
from typing import Dict, Optional

from .config import SLOT_FILES

logger = logging.getLogger(__name__)


class FileStorage:
    """File-backed storage with one file per slot"""

    def __init__(self, base_dir, slot_files: Optional[Dict[str, str]] = None):
        self.base_dir = Path(base_dir)
        self.slot_files = dict(SLOT_FILES if slot_files is None else slot_files)

    def path_for(self, key: str) -> Path:
        return self.base_dir / self.slot_files.get(key, key)

    def backup_path_for(self, key: str) -> Path:
        path = self.path_for(key)
        return path.with_name(path.name + ".bak")

    def get_item(self, key: str) -> Optional[str]:
        """Return the slot contents, or None if the slot was never written"""
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def get_backup(self, key: str) -> Optional[str]:
        """Return the contents the slot held before its last write"""
        backup = self.backup_path_for(key)
        if not backup.exists():
            return None
        return backup.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str):
        """Replace the slot contents atomically; raises OSError on failure"""
        path = self.path_for(key)
        backup = self.backup_path_for(key)
        temp_file = path.with_name(path.name + ".tmp")

        self.base_dir.mkdir(parents=True, exist_ok=True)
        try:
            temp_file.write_text(value, encoding="utf-8")
            if path.exists():
                path.replace(backup)
            temp_file.replace(path)
        finally:
            if temp_file.exists():
                try:
                    temp_file.unlink()
                except OSError as cleanup_e:
                    logger.error(f"Failed to clean up temporary file {temp_file}: {cleanup_e}")
