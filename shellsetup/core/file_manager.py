"""
File management for generated configuration files and run summaries.
"""

import json
import logging
import shutil
from pathlib import Path
from datetime import datetime
from typing import Dict, Any, Optional


class ConfigFileManager:
    """Writes, backs up and amends files in the user's home directory."""

    def __init__(self, dry_run: bool = False):
        """
        Initialize the file manager.

        Args:
            dry_run: If True, log intended writes without touching the disk
        """
        self.logger = logging.getLogger(__name__)
        self.dry_run = dry_run

    def write(self, path: Path, content: str, mode: Optional[int] = None) -> Path:
        """
        Write a file, replacing any previous content.

        Args:
            path: Destination file
            content: File content
            mode: Optional permission bits

        Returns:
            Path to the written file
        """
        path = Path(path)
        if self.dry_run:
            self.logger.info(f"[dry-run] would write {path} ({len(content)} bytes)")
            return path

        path.parent.mkdir(parents=True, exist_ok=True)
        # Replace symlinks left by older setups instead of writing through them
        if path.is_symlink():
            path.unlink()
        path.write_text(content, encoding="utf-8")
        if mode is not None:
            path.chmod(mode)

        self.logger.info(f"Wrote {path}")
        return path

    def backup(self, path: Path, suffix: str = ".bak") -> Optional[Path]:
        """
        Move an existing file aside.

        Returns:
            The backup path, or None when there was nothing to back up
        """
        path = Path(path)
        if not path.exists() and not path.is_symlink():
            return None
        backup_path = path.with_name(path.name + suffix)
        if self.dry_run:
            self.logger.info(f"[dry-run] would move {path} to {backup_path}")
            return backup_path

        shutil.move(str(path), str(backup_path))
        self.logger.warning(f"Moved old config file to {backup_path}")
        return backup_path

    def ensure_line(self, path: Path, line: str, marker: Optional[str] = None) -> bool:
        """
        Make sure `path` contains `line`, creating the file if needed.

        Args:
            path: File to amend
            line: Line to add
            marker: Text whose presence means the file is already fine
                (defaults to `line`)

        Returns:
            True if the file was created or changed
        """
        path = Path(path)
        needle = marker or line
        existing = path.read_text(encoding="utf-8") if path.exists() else None
        if existing is not None and needle in existing:
            return False

        if self.dry_run:
            self.logger.info(f"[dry-run] would add '{line}' to {path}")
            return True

        path.parent.mkdir(parents=True, exist_ok=True)
        if existing is None:
            path.write_text(line + "\n", encoding="utf-8")
            self.logger.info(f"Created {path}")
        else:
            separator = "" if existing.endswith("\n") or not existing else "\n"
            path.write_text(existing + separator + line + "\n", encoding="utf-8")
            self.logger.info(f"Appended to {path}")
        return True

    def save_json(self, path: Path, data: Dict[str, Any]) -> Path:
        """
        Save JSON data to file. Written even in dry-run mode, like the log.

        Args:
            path: Destination file
            data: Data to save

        Returns:
            Path to saved file
        """
        path = Path(path)
        data = {**data}
        # Add timestamp if not present
        if 'timestamp' not in data:
            data['timestamp'] = datetime.utcnow().isoformat()

        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(data, f, indent=2, default=str)

        self.logger.info(f"Saved JSON to {path}")
        return path
