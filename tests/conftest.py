"""Shared fixtures for obsidian-jekyll tests."""

from pathlib import Path
from typing import Callable, Dict, Iterable, Union

import pytest


@pytest.fixture
def make_vault(tmp_path) -> Callable[..., Path]:
    """Factory creating a vault directory with the given files.

    Accepts either an iterable of relative paths (written with a dummy
    heading) or a mapping of relative path to content.
    """
    def make(files: Union[Iterable[str], Dict[str, Union[str, bytes]]], name: str = "vault") -> Path:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        items = files.items() if isinstance(files, dict) else ((f, "# HW") for f in files)
        for rel, content in items:
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return root
    return make
