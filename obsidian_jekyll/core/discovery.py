"""Vault discovery module for finding notes to publish."""

import logging
from pathlib import Path
from typing import List

from obsidian_jekyll.core.models import NoteContext

log = logging.getLogger(__name__)

NOTE_PATTERNS = ('*.md', '*.MD', '*.markdown', '*.MARKDOWN')


class VaultDiscovery:
    """Finds the markdown notes of a vault directory."""

    def __init__(self, source_dir: Path):
        """Initialize VaultDiscovery.

        Args:
            source_dir: Directory whose notes are published
        """
        self.source_dir = Path(source_dir)

    def discover_all(self) -> List[NoteContext]:
        """Find all notes below the source directory.

        Hidden files and directories (e.g. ``.obsidian``) are skipped.

        Returns:
            NoteContext for every note, sorted by path

        Raises:
            FileNotFoundError: If the source directory does not exist
        """
        if not self.source_dir.is_dir():
            raise FileNotFoundError(f"Source directory not found: {self.source_dir}")

        found = set()
        for pattern in NOTE_PATTERNS:
            for note_path in self.source_dir.rglob(pattern):
                if self._is_hidden(note_path) or not note_path.is_file():
                    continue
                found.add(note_path)

        log.debug("found %d notes in %s", len(found), self.source_dir)
        return [NoteContext(path=p) for p in sorted(found)]

    def _is_hidden(self, path: Path) -> bool:
        relative = path.relative_to(self.source_dir)
        return any(part.startswith('.') for part in relative.parts)
