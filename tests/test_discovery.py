"""Tests for VaultDiscovery class."""

import pytest
from pathlib import Path
import tempfile
import shutil

from obsidian_jekyll.core.discovery import VaultDiscovery


class TestVaultDiscovery:
    """Tests for VaultDiscovery class."""

    @pytest.fixture
    def temp_vault(self):
        """Create a temporary vault with test notes."""
        temp_dir = tempfile.mkdtemp()
        vault_path = Path(temp_dir)

        (vault_path / "note1.md").write_text("""---
tags:
  - publish
---

# Test Note One
""")

        nested = vault_path / "topics" / "cs"
        nested.mkdir(parents=True)
        (nested / "graphs.md").write_text("# Graphs\n")
        (vault_path / "topics" / "Upper.MD").write_text("# Upper\n")
        (vault_path / "long.markdown").write_text("# Long\n")

        # Obsidian settings and non-note files
        hidden = vault_path / ".obsidian"
        hidden.mkdir()
        (hidden / "workspace.md").write_text("# Hidden\n")
        (vault_path / ".draft.md").write_text("# Hidden file\n")
        (vault_path / "image.png").write_bytes(b"\x89PNG")
        (vault_path / "notes.txt").write_text("plain text")

        yield vault_path
        shutil.rmtree(temp_dir)

    def test_discover_all(self, temp_vault):
        notes = VaultDiscovery(temp_vault).discover_all()

        names = {n.path.name for n in notes}
        assert names == {"note1.md", "graphs.md", "Upper.MD", "long.markdown"}

    def test_sorted_by_path(self, temp_vault):
        notes = VaultDiscovery(temp_vault).discover_all()

        paths = [n.path for n in notes]
        assert paths == sorted(paths)

    def test_skips_hidden(self, temp_vault):
        notes = VaultDiscovery(temp_vault).discover_all()

        assert not any(".obsidian" in n.path.parts for n in notes)
        assert not any(n.path.name.startswith(".") for n in notes)

    def test_accepts_string_path(self, temp_vault):
        notes = VaultDiscovery(str(temp_vault)).discover_all()

        assert len(notes) == 4

    def test_read_raw(self, temp_vault):
        notes = VaultDiscovery(temp_vault).discover_all()
        note = next(n for n in notes if n.path.name == "graphs.md")

        assert note.read_raw() == "# Graphs\n"

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            VaultDiscovery(tmp_path / "missing").discover_all()

    def test_empty_vault(self, tmp_path):
        assert VaultDiscovery(tmp_path).discover_all() == []
