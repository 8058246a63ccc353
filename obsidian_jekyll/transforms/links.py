"""Link rewriting for obsidian-jekyll.

Turns wikilinks into standard markdown links and images, then points every
vault link at its published location.
"""

import os
from typing import Optional, Union
from urllib.parse import quote, unquote

from obsidian_jekyll.core.embedding import EmbedType
from obsidian_jekyll.core.models import MediaReferenceLog, Rewrite
from obsidian_jekyll.core.nodes import Image, Link, Root, Text, WikiLink, walk
from obsidian_jekyll.core.resolver import Found, LinkResolver

# Characters left alone by JavaScript's encodeURI, besides letters and digits
URI_SAFE = ";,/?:@&=+$-_.!~*'()#"

NOTE_SUFFIXES = ('.md', '.markdown')


def encode_uri(url: str) -> str:
    return quote(url, safe=URI_SAFE)


def decode_uri(url: str) -> str:
    return unquote(url)


def wikilink_to_markdown(node: WikiLink) -> Optional[Union[Link, Image]]:
    """Build the markdown node that replaces a wikilink.

    Plain wikilinks become links and image embeddings become images. Other
    embeddings have no markdown form and give None.
    """
    label = node.alias or node.target
    if not node.is_embedding:
        return Link(url=encode_uri(node.target), children=[Text(label)])
    if node.embed_type is EmbedType.IMG:
        return Image(url=encode_uri(node.target), alt=label)
    return None


class LinkRewriter:
    """Transform stage rewriting wikilinks, links and images.

    Resolved vault links point at ``/<path relative to root>``, with note
    extensions dropped and ``base_url`` prepended when configured. Links
    that are external or cannot be resolved are left as written. Every
    resolved image is reported in the stage's media log.
    """

    def __init__(
        self,
        current_dir: str,
        root_dir: str,
        resolver: Optional[LinkResolver] = None,
        base_url: Optional[str] = None,
    ):
        """Initialize LinkRewriter.

        Args:
            current_dir: Directory of the document being rewritten
            root_dir: Vault root used for resolution and output paths
            resolver: Link resolver (default: LinkResolver on the local disk)
            base_url: Optional prefix for rewritten links, e.g. "/my-site"
        """
        self.current_dir = current_dir
        self.root_dir = os.path.abspath(root_dir)
        self.resolver = resolver or LinkResolver()
        self.base_url = base_url

    def __call__(self, tree: Root) -> Rewrite:
        media: MediaReferenceLog = []
        for node, parent, index in walk(tree):
            if isinstance(node, WikiLink):
                replacement = wikilink_to_markdown(node)
                if replacement is None:
                    continue
                parent.children[index] = node = replacement

            if isinstance(node, (Link, Image)):
                path = self._relink(node)
                if path is not None and isinstance(node, Image):
                    media.append(path)
        return Rewrite(tree, media)

    def _relink(self, node: Union[Link, Image]) -> Optional[str]:
        """Point a node at its resolved target.

        Returns:
            Absolute path of the resolved file, or None if left untouched
        """
        url = decode_uri(node.url)
        target, hash_mark, fragment = url.partition('#')
        if not target:
            return None

        result = self.resolver(target, self.current_dir, self.root_dir)
        if not isinstance(result, Found):
            return None

        node.url = encode_uri(self.format_target(result.path) + hash_mark + fragment)
        return result.path

    def format_target(self, path: str) -> str:
        """Published URL path of a vault file."""
        relative = os.path.relpath(path, self.root_dir).replace(os.sep, '/')
        stem, ext = os.path.splitext(relative)
        if ext.lower() in NOTE_SUFFIXES:
            relative = stem
        if self.base_url:
            return f"{self.base_url.rstrip('/')}/{relative}"
        return f"/{relative}"
