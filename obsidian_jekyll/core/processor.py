"""Content pipeline for transforming Obsidian notes."""

import logging
import os
import re
from typing import List, Optional, Sequence

from obsidian_jekyll.config import ConfigurationError, PipelineConfig
from obsidian_jekyll.core.models import Failed, Filter, MediaReferenceLog, ParseError, ProcessResult, Rendered, Skipped, Transform
from obsidian_jekyll.core.parser import MarkdownParser
from obsidian_jekyll.core.resolver import LinkResolver
from obsidian_jekyll.transforms.filters import filter_by_tags
from obsidian_jekyll.transforms.frontmatter import cleanup, merge
from obsidian_jekyll.transforms.links import LinkRewriter
from obsidian_jekyll.transforms.pages import child_page_frontmatter

log = logging.getLogger(__name__)


class ContentPipeline:
    """Runs one document through filters, parsing, transforms and serialization.

    The stage chain is fixed when the pipeline is built:
    - filters see the raw text and must all accept it
    - transforms run in registration order over the parsed tree
    - the tree is serialized back to markdown
    """

    def __init__(
        self,
        config: PipelineConfig,
        transforms: Sequence[Transform],
        filters: Sequence[Filter] = (),
        parser: Optional[MarkdownParser] = None,
    ):
        """Initialize ContentPipeline.

        Args:
            config: Settings shared by the whole site build
            transforms: Stages applied in order to the parsed document
            filters: Predicates over raw text; the first rejection skips it
            parser: Parser/serializer pair (default: built from config)

        Raises:
            ConfigurationError: If the configuration cannot work
        """
        self.config = config
        self._validate()
        self.transforms = tuple(transforms)
        self.filters = tuple(filters)
        self.parser = parser or MarkdownParser(alias_divider=config.alias_divider)

    def _validate(self) -> None:
        divider = self.config.alias_divider
        if not divider:
            raise ConfigurationError("alias_divider must not be empty")
        if re.search(r'[\[\]\n]', divider):
            raise ConfigurationError(f"alias_divider cannot contain brackets or newlines: {divider!r}")

        base_url = self.config.base_url
        if base_url and not base_url.startswith('/') and not re.match(r'^https?://', base_url):
            log.warning("base_url %r is neither rooted nor absolute; links may break", base_url)

    def process(self, content: str) -> ProcessResult:
        """Process one document.

        Args:
            content: Raw markdown including frontmatter

        Returns:
            Skipped if a filter rejected the text, Failed if it could not
            be parsed, otherwise Rendered with the media it references
        """
        if not self.filter(content):
            return Skipped()

        try:
            tree = self.parser.parse(content)
        except ParseError as e:
            log.warning("Failed to parse document: %s", e)
            return Failed(str(e))

        media: MediaReferenceLog = []
        for transform in self.transforms:
            result = transform(tree)
            tree = result.tree
            media.extend(result.media)

        return Rendered(self.parser.serialize(tree), media)

    def filter(self, content: str) -> bool:
        for accept in self.filters:
            if not accept(content):
                log.debug("Filtered out by %s", getattr(accept, "__qualname__", accept))
                return False
        return True


def note_pipeline(
    config: PipelineConfig,
    note_path: str,
    resolver: Optional[LinkResolver] = None,
) -> ContentPipeline:
    """Build the standard pipeline for a vault note.

    Stages: blank the note's frontmatter, add just-the-docs navigation
    frontmatter, rewrite links. Notes must pass the tag filter.

    Args:
        config: Site build settings
        note_path: Path of the note being processed
        resolver: Link resolver shared between notes (optional)

    Returns:
        A ContentPipeline for that note
    """
    transforms: List[Transform] = [
        cleanup(),
        merge(child_page_frontmatter(note_path, config.source_dir)),
        LinkRewriter(
            current_dir=os.path.dirname(os.path.abspath(note_path)),
            root_dir=config.root_dir,
            resolver=resolver,
            base_url=config.base_url,
        ),
    ]
    filters = [filter_by_tags(config.tag_filter, config.publish_all)]
    return ContentPipeline(config, transforms, filters)
