"""
obsidian-jekyll - Publish Obsidian notes as a Jekyll site

Converts a vault of wikilink-flavored markdown notes into a markdown tree
for Jekyll's just-the-docs theme, with support for:
- Wikilink and embedding conversion
- Multi-tier link resolution against the vault
- Frontmatter cleanup and merging
- Tag-based note filtering
"""

from obsidian_jekyll.config import ConfigurationError, PipelineConfig, load_config
from obsidian_jekyll.core.models import Failed, NoteError, PublishResult, Rendered, Skipped
from obsidian_jekyll.core.parser import MarkdownParser
from obsidian_jekyll.core.resolver import LinkResolver
from obsidian_jekyll.core.processor import ContentPipeline, note_pipeline
from obsidian_jekyll.site import SiteBuilder, build_site

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "PipelineConfig",
    "load_config",
    "Failed",
    "NoteError",
    "PublishResult",
    "Rendered",
    "Skipped",
    "MarkdownParser",
    "LinkResolver",
    "ContentPipeline",
    "note_pipeline",
    "SiteBuilder",
    "build_site",
]
