"""Raw-text filters deciding whether a note gets published."""

import logging
from typing import Any, Dict, Iterable, List

import yaml

from obsidian_jekyll.core.models import Filter
from obsidian_jekyll.core.parser import split_frontmatter

log = logging.getLogger(__name__)


def filter_by_tags(tags: Iterable[str], publish_all: bool = False) -> Filter:
    """Create a filter accepting notes tagged with any of ``tags``.

    Only the frontmatter is read; the rest of the note is never parsed.

    Args:
        tags: Tags that make a note publishable
        publish_all: Accept every note without looking at tags

    Returns:
        A filter function raw_text -> bool
    """
    wanted = set(tags)

    def accept(content: str) -> bool:
        if publish_all:
            return True
        note_tags = extract_tags(parse_frontmatter(content))
        return bool(wanted.intersection(note_tags))
    return accept


def parse_frontmatter(content: str) -> Dict[str, Any]:
    """Parse YAML frontmatter from raw markdown.

    Args:
        content: Full note text

    Returns:
        Frontmatter dict (empty if not found or invalid)
    """
    text, _ = split_frontmatter(content)
    if text is None:
        return {}

    try:
        frontmatter = yaml.safe_load(text)
    except yaml.YAMLError as e:
        log.warning("Failed to parse frontmatter YAML: %s", e)
        return {}

    if not isinstance(frontmatter, dict):
        return {}
    return frontmatter


def extract_tags(frontmatter: Dict[str, Any]) -> List[str]:
    """Extract tags from frontmatter.

    Handles both list and string formats; non-string list entries are
    ignored.
    """
    tag_data = frontmatter.get('tags')
    if isinstance(tag_data, list):
        return [tag for tag in tag_data if isinstance(tag, str)]
    if isinstance(tag_data, str):
        return [tag_data]
    return []
