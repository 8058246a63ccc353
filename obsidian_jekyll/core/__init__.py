"""Core components for obsidian-jekyll."""

from obsidian_jekyll.core.models import Failed, NoteContext, NoteError, ParseError, PublishResult, Rendered, Rewrite, Skipped
from obsidian_jekyll.core.embedding import EmbedType, classify_embedding
from obsidian_jekyll.core.parser import MarkdownParser
from obsidian_jekyll.core.resolver import External, Found, LinkResolver, LocalFS, Unresolved
from obsidian_jekyll.core.discovery import VaultDiscovery
from obsidian_jekyll.core.processor import ContentPipeline, note_pipeline

__all__ = [
    "Failed",
    "NoteContext",
    "NoteError",
    "ParseError",
    "PublishResult",
    "Rendered",
    "Rewrite",
    "Skipped",
    "EmbedType",
    "classify_embedding",
    "MarkdownParser",
    "External",
    "Found",
    "LinkResolver",
    "LocalFS",
    "Unresolved",
    "VaultDiscovery",
    "ContentPipeline",
    "note_pipeline",
]
