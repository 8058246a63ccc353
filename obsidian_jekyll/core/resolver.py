"""Resolution of vault links to files.

Rooted links (``/dir/note``) are matched literally under the vault root.
Relative links are searched in tiers: the current directory, then every
directory below it, then the whole vault. The first tier with a match wins
and the structurally closest file of that tier is returned.
"""

import glob
import logging
import os
import re
from dataclasses import dataclass
from typing import List, Optional, Protocol, Union

log = logging.getLogger(__name__)

NOTE_EXTENSIONS = ('md', 'MD', 'markdown', 'MARKDOWN')

EXTERNAL_LINK = re.compile(r'^https?://')


@dataclass(frozen=True)
class Found:
    """The link points at ``path``, an absolute path inside the vault."""
    path: str


@dataclass(frozen=True)
class Unresolved:
    """The link was searched for and no file matched."""


@dataclass(frozen=True)
class External:
    """The link leaves the vault and is not resolved at all."""


ResolvedLink = Union[Found, Unresolved, External]


class VaultFS(Protocol):
    """Case-sensitive glob listing scoped to a base directory."""

    def glob(self, base: str, pattern: str) -> List[str]:
        """Return absolute paths of files under ``base`` matching ``pattern``."""
        ...


class LocalFS:
    """VaultFS backed by the local filesystem."""

    def glob(self, base: str, pattern: str) -> List[str]:
        matches = glob.glob(pattern, root_dir=base, recursive=True)
        paths = (os.path.normpath(os.path.join(base, m)) for m in matches)
        return [p for p in paths if os.path.isfile(p)]


class LinkResolver:
    """Maps a raw link to a file in the vault.

    Resolution never raises: external links give ``External`` and misses
    give ``Unresolved``.
    """

    def __init__(self, fs: Optional[VaultFS] = None):
        self.fs = fs or LocalFS()

    def __call__(self, link: str, current_dir: str, root_dir: str) -> ResolvedLink:
        return self.resolve(link, current_dir, root_dir)

    def resolve(self, link: str, current_dir: str, root_dir: str) -> ResolvedLink:
        """Resolve a link found in a document located in ``current_dir``.

        Args:
            link: Decoded link target, e.g. ``notes/page`` or ``/image.jpg``
            current_dir: Directory of the document containing the link
            root_dir: Vault root; results never leave this directory

        Returns:
            Found, Unresolved or External
        """
        log.debug("resolving: %s, curr: %s, root: %s", link, current_dir, root_dir)
        if EXTERNAL_LINK.match(link):
            log.debug("resolving result: external link")
            return External()

        root_dir = os.path.abspath(root_dir)
        current_dir = os.path.abspath(current_dir)
        names = candidate_names(link)

        if link.startswith('/'):
            # rooted links are only looked up at their literal location
            tiers = [(root_dir, [glob.escape(n.lstrip('/')) for n in names])]
        else:
            local = [glob.escape(n) for n in names]
            nested = [f"**/{p}" for p in local]
            tiers = [
                (current_dir, local),
                (current_dir, nested),
                (root_dir, nested),
            ]

        for base, patterns in tiers:
            found = self._search(base, patterns, root_dir)
            if found:
                result = closest(found, base)
                log.debug("resolving result: %s", result)
                return Found(result)

        log.debug("resolving result: not found")
        return Unresolved()

    def _search(self, base: str, patterns: List[str], root_dir: str) -> List[str]:
        found = []
        for pattern in patterns:
            found.extend(p for p in self.fs.glob(base, pattern) if within(p, root_dir))
        return list(dict.fromkeys(found))


def candidate_names(link: str) -> List[str]:
    """File names a link may refer to.

    A link with an extension names exactly one file; otherwise every note
    extension is tried.
    """
    if has_extension(link):
        return [link]
    return [f"{link}.{ext}" for ext in NOTE_EXTENSIONS]


def has_extension(link: str) -> bool:
    return os.path.splitext(os.path.basename(link))[1] != ''


def within(path: str, root_dir: str) -> bool:
    path = os.path.abspath(path)
    return os.path.commonpath([path, root_dir]) == root_dir


def closest(paths: List[str], base: str) -> str:
    """Pick the path with the fewest separators relative to ``base``.

    Ties go to the lexicographically smallest path.
    """
    return min(
        sorted(paths),
        key=lambda p: os.path.relpath(p, base).count(os.sep),
    )
