"""Markdown parsing and serialization with wikilink support.

Block structure comes from markdown-it; fenced code, indented code and HTML
blocks are kept verbatim. Everything else is scanned for inline links,
images, wikilinks and code spans. Untouched source text is written back
exactly as it was read.
"""

import re
from typing import List, Optional, Tuple

from markdown_it import MarkdownIt

from obsidian_jekyll.config import DEFAULT_ALIAS_DIVIDER
from obsidian_jekyll.core.embedding import classify_embedding
from obsidian_jekyll.core.models import ParseError
from obsidian_jekyll.core.nodes import Frontmatter, Image, Link, Node, Raw, Root, Text, WikiLink

VERBATIM_BLOCKS = {'fence', 'code_block', 'html_block'}

# Frontmatter: a --- line at the very top, closed by another --- line
FRONTMATTER_PATTERN = re.compile(
    r'\A---[ \t]*\n(?P<value>.*?)\n?^---[ \t]*$\n?',
    re.MULTILINE | re.DOTALL,
)

NEWLINES = re.compile(r'\r\n?')

BLANK_LINE = re.compile(r'\n[ \t]*\n')

# Code spans never cross a blank line
CODE_SPAN = r'(?<!`)(?P<ticks>`+)(?!`)(?:(?!\n[ \t]*\n).)+?(?<!`)(?P=ticks)(?!`)'

CODE_PATTERN = re.compile(CODE_SPAN, re.DOTALL)

INLINE_PATTERN = re.compile(
    r'(?P<escape>\\[!-/:-@\[-`{-~])'
    r'|(?P<code>' + CODE_SPAN + r')'
    r'|(?P<wikilink>(?P<bang>!?)\[\[(?P<body>[^\[\]\n]+)\]\])'
    r'|(?P<opener>!?\[)',
    re.DOTALL,
)

# Inline destination following a label: (dest "title")
DESTINATION_PATTERN = re.compile(
    r'\(\s*'
    r'(?:<(?P<angle>[^<>\n]*)>'
    r'|(?P<bare>[^\s()<>]*(?:\([^\s()]*\)[^\s()]*)*))'
    r'(?:\s+(?P<title>"[^"\n]*"|\'[^\'\n]*\'))?'
    r'\s*\)'
)


def split_frontmatter(text: str) -> Tuple[Optional[str], str]:
    """Split a document into frontmatter text and body.

    Newlines are normalized first. The frontmatter is None unless the
    document opens with a closed ``---`` block.
    """
    text = NEWLINES.sub('\n', text)
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None, text
    return match.group('value'), text[match.end():]


class MarkdownParser:
    """Parses markdown with frontmatter and wikilinks into a document tree."""

    def __init__(self, alias_divider: str = DEFAULT_ALIAS_DIVIDER):
        if not alias_divider:
            raise ValueError("Alias divider must not be empty")
        self.alias_divider = alias_divider
        self._md = MarkdownIt('commonmark')

    def parse(self, text: str) -> Root:
        """Parse a markdown document.

        Args:
            text: Raw document text including any frontmatter

        Returns:
            Root node of the document tree

        Raises:
            ParseError: If the block structure cannot be parsed
        """
        root = Root()
        value, text = split_frontmatter(text)
        if value is not None:
            root.children.append(Frontmatter(value=value))

        try:
            tokens = self._md.parse(text)
        except Exception as e:
            raise ParseError(f"Failed to parse markdown: {e}") from e

        offsets = _line_offsets(text)
        cursor = 0
        for start, end in _verbatim_ranges(tokens):
            root.children.extend(self.parse_inline(text[cursor:offsets(start)]))
            root.children.append(Raw(text[offsets(start):offsets(end)]))
            cursor = offsets(end)
        root.children.extend(self.parse_inline(text[cursor:]))
        return root

    def parse_inline(self, source: str) -> List[Node]:
        """Split inline markdown into text, code, link, image and wikilink nodes.

        Link labels may nest brackets, hold images and span lines; the label
        of a link is parsed into the link's children.
        """
        nodes: List[Node] = []
        pos = search = 0
        while True:
            match = INLINE_PATTERN.search(source, search)
            if match is None:
                break
            node, end = self._inline_node(source, match)
            if node is None:
                search = end
                continue
            if match.start() > pos:
                nodes.append(Text(source[pos:match.start()]))
            nodes.append(node)
            pos = search = end
        if pos < len(source):
            nodes.append(Text(source[pos:]))
        return nodes

    def parse_wikilink(self, body: str, is_embedding: bool) -> Optional[WikiLink]:
        """Build a wikilink node from the text between the brackets.

        Only the first divider splits target from alias; any further
        dividers belong to the alias.
        """
        target, divider, alias = body.partition(self.alias_divider)
        if not target:
            return None
        return WikiLink(
            target=target,
            alias=alias if divider else None,
            is_embedding=is_embedding,
            embed_type=classify_embedding(target) if is_embedding else None,
        )

    def _inline_node(self, source: str, match: "re.Match[str]") -> Tuple[Optional[Node], int]:
        """Node for a match and the offset where scanning resumes."""
        if match.group('code') is not None:
            return Raw(match.group('code')), match.end()
        if match.group('wikilink') is not None:
            return self.parse_wikilink(match.group('body'), bool(match.group('bang'))), match.end()
        if match.group('opener') is not None:
            return self._parse_link(source, match.start(), match.end())
        # escaped characters stay part of the surrounding text
        return None, match.end()

    def _parse_link(self, source: str, start: int, label_start: int) -> Tuple[Optional[Node], int]:
        label_end = _label_end(source, label_start)
        if label_end is None:
            return None, start + 1
        destination = DESTINATION_PATTERN.match(source, label_end + 1)
        if destination is None:
            return None, start + 1

        label = source[label_start:label_end]
        url, title = _link_target(destination)
        written = (url, title, destination.group(0)[1:-1])
        if source[start] == '!':
            node: Node = Image(url=url, alt=label, title=title, written=written)
        else:
            node = Link(url=url, children=self.parse_inline(label), title=title, written=written)
        return node, destination.end()

    def serialize(self, tree: Root) -> str:
        """Render a document tree back to markdown."""
        return ''.join(self._render(node) for node in tree.children)

    def _render(self, node: Node) -> str:
        if isinstance(node, Frontmatter):
            if not node.value:
                return '---\n---\n'
            return f'---\n{node.value}\n---\n'
        if isinstance(node, (Text, Raw)):
            return node.value
        if isinstance(node, Link):
            label = ''.join(self._render(child) for child in node.children)
            return f'[{label}]({_destination_text(node)})'
        if isinstance(node, Image):
            return f'![{node.alt}]({_destination_text(node)})'
        if isinstance(node, WikiLink):
            bang = '!' if node.is_embedding else ''
            alias = f'{self.alias_divider}{node.alias}' if node.alias is not None else ''
            return f'{bang}[[{node.target}{alias}]]'
        raise TypeError(f"Cannot serialize node of type {type(node).__name__}")


def _line_offsets(text: str):
    """Return a function mapping a line number to its character offset."""
    starts = [0] + [m.end() for m in re.finditer('\n', text)]

    def offset(line: int) -> int:
        return starts[line] if line < len(starts) else len(text)
    return offset


def _verbatim_ranges(tokens) -> List[Tuple[int, int]]:
    """Line ranges of blocks that must be reproduced verbatim."""
    ranges = sorted(
        (token.map[0], token.map[1])
        for token in tokens
        if token.type in VERBATIM_BLOCKS and token.map
    )
    merged: List[Tuple[int, int]] = []
    for start, end in ranges:
        if merged and start < merged[-1][1]:
            continue
        merged.append((start, end))
    return merged


def _label_end(source: str, start: int) -> Optional[int]:
    """Offset of the bracket closing a label whose text begins at ``start``.

    Brackets nest; escaped brackets and brackets inside code spans do not
    count. A label never crosses a blank line.
    """
    depth = 1
    pos = start
    while pos < len(source):
        char = source[pos]
        if char == '\\':
            pos += 2
            continue
        if char == '`':
            code = CODE_PATTERN.match(source, pos)
            if code is not None:
                pos = code.end()
                continue
        if char == '\n' and BLANK_LINE.match(source, pos):
            return None
        if char == '[':
            depth += 1
        elif char == ']':
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    return None


def _link_target(match: "re.Match[str]") -> Tuple[str, Optional[str]]:
    url = match.group('angle')
    if url is None:
        url = match.group('bare') or ''
    title = match.group('title')
    if title is not None:
        title = title[1:-1]
    return url, title


def _destination_text(node) -> str:
    """Destination as written in the source, unless a transform changed it."""
    if node.written is not None:
        url, title, text = node.written
        if (url, title) == (node.url, node.title):
            return text
    return _format_target(node.url, node.title)


def _format_target(url: str, title: Optional[str]) -> str:
    if re.search(r'\s', url) or url.count('(') != url.count(')'):
        url = f'<{url}>'
    if title is None:
        return url
    escaped = title.replace('"', '\\"')
    return f'{url} "{escaped}"'
