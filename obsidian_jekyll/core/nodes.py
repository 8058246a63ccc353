"""Markdown document tree.

A document is a ``Root`` holding an ordered list of nodes. Each node kind is
its own dataclass; transforms change a node's kind by building a new node and
placing it in the parent's child slot.
"""

from dataclasses import dataclass, field
from typing import ClassVar, Iterator, List, Optional, Tuple, Union

from obsidian_jekyll.core.embedding import EmbedType


@dataclass
class Frontmatter:
    """Opaque YAML metadata block; only ever the first child of Root."""
    value: str = ""
    type: ClassVar[str] = "yaml"


@dataclass
class Text:
    """Markdown text passed through as written."""
    value: str
    type: ClassVar[str] = "text"


@dataclass
class Raw:
    """Verbatim source that is never rewritten (code, HTML blocks)."""
    value: str
    type: ClassVar[str] = "raw"


@dataclass
class Image:
    url: str
    alt: str = ""
    title: Optional[str] = None
    written: Optional[Tuple[str, Optional[str], str]] = field(default=None, compare=False, repr=False)
    type: ClassVar[str] = "image"


@dataclass
class WikiLink:
    """A ``[[target|alias]]`` or ``![[target|alias]]`` reference.

    ``embed_type`` is set for embeddings and None for plain wikilinks.
    """
    target: str
    alias: Optional[str]
    is_embedding: bool
    embed_type: Optional[EmbedType]
    type: ClassVar[str] = "wikiLink"

    def __post_init__(self):
        if self.is_embedding and self.embed_type is None:
            raise ValueError(f"Embedding wikilink without embed type: {self.target}")
        if not self.is_embedding and self.embed_type is not None:
            raise ValueError(f"Plain wikilink with embed type: {self.target}")


@dataclass
class Link:
    """Inline link. ``written`` holds the destination as it appeared in the source."""
    url: str
    children: List["Node"] = field(default_factory=list)
    title: Optional[str] = None
    written: Optional[Tuple[str, Optional[str], str]] = field(default=None, compare=False, repr=False)
    type: ClassVar[str] = "link"


@dataclass
class Root:
    children: List["Node"] = field(default_factory=list)
    type: ClassVar[str] = "root"


Node = Union[Frontmatter, Text, Raw, Image, WikiLink, Link]
Parent = Union[Root, Link]


def walk(tree: Parent) -> Iterator[Tuple["Node", Parent, int]]:
    """Depth-first walk yielding ``(node, parent, index)``.

    A visitor may replace ``parent.children[index]`` while iterating; the
    walk then descends into the replacement.
    """
    index = 0
    while index < len(tree.children):
        yield tree.children[index], tree, index
        current = tree.children[index]
        if isinstance(current, Link):
            yield from walk(current)
        index += 1


def find_frontmatter(tree: Root) -> Optional[Frontmatter]:
    if tree.children and isinstance(tree.children[0], Frontmatter):
        return tree.children[0]
    return None
