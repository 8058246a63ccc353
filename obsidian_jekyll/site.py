"""Site builder: publishes a vault directory as a just-the-docs markdown tree."""

import logging
import os
import shutil
from pathlib import Path
from typing import List, Set, Union

from obsidian_jekyll.config import PipelineConfig
from obsidian_jekyll.core.discovery import VaultDiscovery
from obsidian_jekyll.core.models import Failed, NoteError, PublishResult, Rendered, Skipped, Transform
from obsidian_jekyll.core.processor import ContentPipeline, note_pipeline
from obsidian_jekyll.core.resolver import LinkResolver
from obsidian_jekyll.transforms.frontmatter import setup_new
from obsidian_jekyll.transforms.pages import (
    index_page_frontmatter,
    not_found_content,
    not_found_frontmatter,
    root_index_frontmatter,
)

log = logging.getLogger(__name__)


class SiteBuilder:
    """Writes every publishable note, its media and the synthetic pages.

    Output paths mirror the vault layout relative to ``root_dir``, the same
    base the rewritten links use.
    """

    def __init__(self, config: PipelineConfig, target_dir: Union[str, Path]):
        self.config = config
        self.source_dir = _absolute(config.source_dir)
        self.root_dir = _absolute(config.root_dir)
        self.target_dir = Path(target_dir)
        self.resolver = LinkResolver()
        self._indexed: Set[Path] = set()

    def build(self) -> PublishResult:
        """Publish the whole source directory.

        A note or media file that fails is recorded in the result and the
        build moves on.

        Returns:
            PublishResult listing published, skipped and failed notes
        """
        result = PublishResult()
        media: List[str] = []

        for note in VaultDiscovery(self.source_dir).discover_all():
            log.debug("process file: %s", note.path)
            try:
                processed = note_pipeline(self.config, str(note.path), self.resolver).process(note.read_raw())
            except (OSError, UnicodeDecodeError) as e:
                log.warning("Failed to read %s: %s", note.path, e)
                result.failures.append(NoteError(path=note.path, error=str(e)))
                continue

            if isinstance(processed, Skipped):
                result.skipped.append(note.path)
            elif isinstance(processed, Failed):
                result.failures.append(NoteError(path=note.path, error=processed.error))
            else:
                target = self._target(note.path)
                try:
                    self._write(target, processed.text)
                    self._setup_indexes(note.path)
                except OSError as e:
                    log.warning("Failed to write %s: %s", target, e)
                    result.failures.append(NoteError(path=note.path, error=str(e)))
                    continue
                media.extend(processed.media)
                result.published.append(target)

        for path in dict.fromkeys(media):
            target = self._target(Path(path))
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, target)
            except OSError as e:
                log.warning("Failed to copy %s: %s", path, e)
                result.failures.append(NoteError(path=Path(path), error=str(e)))
                continue
            result.copied_media.append(target)
        if media:
            log.debug("copied %d media files", len(result.copied_media))

        self._write(self.target_dir / '404.md', self._render_page([
            setup_new(not_found_frontmatter()),
            not_found_content(),
        ]))
        self._write(self.target_dir / 'index.md', self._render_page([
            setup_new(root_index_frontmatter()),
        ]))
        return result

    def _setup_indexes(self, note_path: Path) -> None:
        """Create index pages for the directories between a note and the source root."""
        current = note_path.parent
        while current != self.source_dir and self.source_dir in current.parents:
            if current not in self._indexed and not (current / 'index.md').exists():
                self._write(self._target(current / 'index.md'), self._render_page([
                    setup_new(index_page_frontmatter(str(current), str(self.source_dir))),
                ]))
            self._indexed.add(current)
            current = current.parent

    def _render_page(self, transforms: List[Transform]) -> str:
        rendered = ContentPipeline(self.config, transforms).process('')
        if not isinstance(rendered, Rendered):
            raise RuntimeError(f"Synthetic page was not rendered: {rendered}")
        return rendered.text

    def _target(self, path: Path) -> Path:
        return self.target_dir / _absolute(path).relative_to(self.root_dir)

    def _write(self, path: Path, text: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding='utf-8')


def _absolute(path: Union[str, Path]) -> Path:
    return Path(os.path.abspath(path))


def build_site(config: PipelineConfig, target_dir: Union[str, Path]) -> PublishResult:
    """Publish ``config.source_dir`` into ``target_dir``."""
    return SiteBuilder(config, target_dir).build()
