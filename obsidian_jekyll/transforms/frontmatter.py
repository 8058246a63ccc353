"""Frontmatter transform factories for obsidian-jekyll.

These factories create transform stages that manage the single frontmatter
block of a document. The block's YAML is never parsed: merging is plain text
concatenation and may produce duplicate keys.
"""

import logging

from obsidian_jekyll.core.models import Rewrite, Transform
from obsidian_jekyll.core.nodes import Frontmatter, Root, find_frontmatter

log = logging.getLogger(__name__)


def cleanup() -> Transform:
    """Create a transform that blanks the frontmatter but keeps the block.

    Returns:
        A transform function tree -> Rewrite
    """
    def transform(tree: Root) -> Rewrite:
        if find_frontmatter(tree) is not None:
            tree.children[0] = Frontmatter(value='')
        return Rewrite(tree)
    return transform


def merge(text: str) -> Transform:
    """Create a transform that appends ``text`` to the frontmatter.

    Blank text is a no-op. Without an existing block a new one holding
    ``text`` is inserted first. An existing block that is empty (as left by
    ``cleanup``) takes ``text`` as is, without a leading blank line.

    Args:
        text: YAML text to add

    Returns:
        A transform function tree -> Rewrite
    """
    def transform(tree: Root) -> Rewrite:
        if not text.strip():
            return Rewrite(tree)

        existing = find_frontmatter(tree)
        if existing is None:
            tree.children.insert(0, Frontmatter(value=text))
        elif existing.value:
            tree.children[0] = Frontmatter(value=f"{existing.value}\n{text}")
        else:
            tree.children[0] = Frontmatter(value=text)
        return Rewrite(tree)
    return transform


def setup_new(text: str) -> Transform:
    """Create a transform that puts a fresh frontmatter block first.

    Meant for synthetic pages that start without frontmatter; a block that
    is already there gets replaced.

    Args:
        text: YAML text of the new block

    Returns:
        A transform function tree -> Rewrite
    """
    def transform(tree: Root) -> Rewrite:
        if find_frontmatter(tree) is not None:
            log.debug("Replacing existing frontmatter block")
            tree.children[0] = Frontmatter(value=text)
        else:
            tree.children.insert(0, Frontmatter(value=text))
        return Rewrite(tree)
    return transform
