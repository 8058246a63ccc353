"""Frontmatter and content for just-the-docs pages.

Every published note gets navigation frontmatter naming its ancestors, and
the site gets synthetic index pages for the root and each directory plus a
404 page. just-the-docs supports at most five ancestor levels.
"""

import os
from typing import Any, Dict, List, Optional

import yaml

from obsidian_jekyll.core.models import Rewrite, Transform
from obsidian_jekyll.core.nodes import Root, Text

ANCESTOR_KEYS = ('parent', 'grand_parent', 'ggrand_parent', 'gggrand_parent', 'ggggrand_parent')

NOT_FOUND_HEADING = '# Page Not Found\n'


def _dump(fields: Dict[str, Any]) -> str:
    fields = {k: v for k, v in fields.items() if v is not None}
    return yaml.dump(
        fields,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    ).rstrip('\n')


def _ancestors(names: List[str]) -> Dict[str, Optional[str]]:
    """Map nearest-first ancestor names onto the just-the-docs keys."""
    return dict(zip(ANCESTOR_KEYS, names))


def _relative_parts(path: str, source_dir: str) -> List[str]:
    relative = os.path.relpath(path, source_dir)
    if relative == os.curdir:
        return []
    return relative.split(os.sep)


def child_page_frontmatter(note_path: str, source_dir: str) -> str:
    """Frontmatter for a published note.

    Args:
        note_path: Path of the note inside source_dir
        source_dir: Directory being published

    Returns:
        YAML text with title, layout and the note's ancestor directories
    """
    title = os.path.splitext(os.path.basename(note_path))[0]
    fields: Dict[str, Any] = {'title': title, 'layout': 'default'}
    parents = _relative_parts(os.path.dirname(note_path), source_dir)
    fields.update(_ancestors(list(reversed(parents))))
    return _dump(fields)


def index_page_frontmatter(dir_path: str, source_dir: str) -> str:
    """Frontmatter for the index page of a directory below source_dir."""
    parts = _relative_parts(dir_path, source_dir)
    fields: Dict[str, Any] = {
        'title': os.path.basename(os.path.normpath(dir_path)),
        'has_toc': True,
        'has_children': True,
        'layout': 'default',
        'nav_exclude': False,
        'index': False,
    }
    fields.update(_ancestors(list(reversed(parts))[1:]))
    return _dump(fields)


def root_index_frontmatter() -> str:
    """Frontmatter for the site's root index page."""
    return _dump({
        'title': 'index',
        'has_toc': False,
        'has_children': False,
        'layout': 'index',
        'nav_exclude': True,
        'index': True,
    })


def not_found_frontmatter() -> str:
    """Frontmatter for the 404 page."""
    return _dump({
        'layout': 'default',
        'title': '404',
        'nav_exclude': True,
        'search_exclude': True,
    })


def not_found_content() -> Transform:
    """Create a transform appending the 404 heading to a page.

    Returns:
        A transform function tree -> Rewrite
    """
    def transform(tree: Root) -> Rewrite:
        tree.children.append(Text(NOT_FOUND_HEADING))
        return Rewrite(tree)
    return transform
