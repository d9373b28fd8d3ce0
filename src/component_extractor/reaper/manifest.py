"""Ledger of files written to the extraction output tree."""
import json
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional
import hashlib


class ExtractionLedger:
    """Track every extracted file, in the order it was written."""

    def __init__(self, component: str = ""):
        """Initialize ledger.

        Args:
            component: Name of the extracted component
        """
        self.component = component
        self._entries: Dict[str, Dict] = {}

    def record(self, path: str, file_hash: str, pruned: bool = False,
               removed: Optional[List[str]] = None):
        """Add (or replace) the record for one written file.

        Args:
            path: Project-relative path of the file
            file_hash: SHA256 hash of the written content
            pruned: Whether unreachable code was removed
            removed: Binding names removed from the file
        """
        self._entries[path] = {
            "path": path,
            "sha256": file_hash,
            "pruned": pruned,
            "removed": list(removed or []),
        }

    def __contains__(self, path: str) -> bool:
        return path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def files(self) -> List[str]:
        """Paths of all extracted files."""
        return list(self._entries)

    def get(self, path: str) -> Optional[Dict]:
        return self._entries.get(path)

    def entries(self) -> List[Dict]:
        return list(self._entries.values())

    def to_dict(self) -> Dict:
        return {
            "version": "1.0",
            "component": self.component,
            "extracted_at": datetime.now().isoformat(),
            "files": self.entries(),
        }

    def write(self, manifest_path: str | Path):
        """Write ledger to disk atomically.

        Args:
            manifest_path: Destination JSON file
        """
        manifest_path = Path(manifest_path)

        # Write to temp file first for atomic operation
        temp_path = manifest_path.with_suffix('.tmp')
        with open(temp_path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

        # Atomic rename
        temp_path.replace(manifest_path)

    @staticmethod
    def calculate_file_hash(file_path: str | Path) -> str:
        """Calculate SHA256 hash of file.

        Args:
            file_path: Path to file

        Returns:
            SHA256 hash as hex string
        """
        sha256_hash = hashlib.sha256()

        with open(file_path, "rb") as f:
            for byte_block in iter(lambda: f.read(4096), b""):
                sha256_hash.update(byte_block)

        return sha256_hash.hexdigest()
