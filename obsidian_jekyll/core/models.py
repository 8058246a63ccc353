"""Data models for obsidian-jekyll."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Union

from obsidian_jekyll.core.nodes import Root

# Absolute paths of media files referenced by a document, in traversal order.
MediaReferenceLog = List[str]


class ParseError(Exception):
    """Raised when a markdown document cannot be parsed."""


@dataclass
class Rewrite:
    """Output of a transform stage: the (mutated) tree and any media it found."""
    tree: Root
    media: MediaReferenceLog = field(default_factory=list)


# Stages run in registration order over the parsed document.
Transform = Callable[[Root], Rewrite]

# Filters see the raw, unparsed text; all must accept.
Filter = Callable[[str], bool]


@dataclass
class NoteContext:
    """Cheapest possible note reference - just location.

    Provides lazy content loading to avoid reading all notes into memory
    during discovery.
    """
    path: Path

    def read_raw(self) -> str:
        """Read file contents on demand."""
        return self.path.read_text(encoding='utf-8')


@dataclass(frozen=True)
class Rendered:
    """A document that passed the filters and was transformed."""
    text: str
    media: MediaReferenceLog = field(default_factory=list)


@dataclass(frozen=True)
class Skipped:
    """A document rejected by one of the pipeline filters."""


@dataclass(frozen=True)
class Failed:
    """A document that could not be processed."""
    error: str


ProcessResult = Union[Rendered, Skipped, Failed]


@dataclass
class NoteError:
    """An error that occurred while processing a note.

    Recorded for notes that cannot be read or written and for media that
    cannot be copied.
    """
    path: Path
    error: str


@dataclass
class PublishResult:
    """Result of a site build."""
    published: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failures: List[NoteError] = field(default_factory=list)
    copied_media: List[Path] = field(default_factory=list)
