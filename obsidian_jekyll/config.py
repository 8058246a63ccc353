"""Pipeline configuration for obsidian-jekyll.

A ``PipelineConfig`` is built once per site build and shared read-only by
every pipeline. It can be written by hand or loaded from a YAML file::

    source_dir: vault/notes
    root_dir: vault/notes       # optional, defaults to source_dir
    base_url: /my-site          # optional
    alias_divider: "|"
    tags: [publish]
    publish_all: false
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, FrozenSet, Mapping, Optional, Union

import yaml

DEFAULT_ALIAS_DIVIDER = '|'

CONFIG_KEYS = {'source_dir', 'root_dir', 'base_url', 'alias_divider', 'tags', 'publish_all'}


class ConfigurationError(Exception):
    """Raised when configuration is missing or invalid."""


@dataclass(frozen=True)
class PipelineConfig:
    """Immutable settings shared by every pipeline of a site build.

    Attributes:
        source_dir: Directory whose notes are published
        root_dir: Vault root that links resolve against (default: source_dir)
        base_url: Prefix for every rewritten vault link, e.g. "/my-site"
        alias_divider: Separator between wikilink target and alias
        tag_filter: Notes must carry one of these tags to be published
        publish_all: Publish every note regardless of tags

    Raises:
        ConfigurationError: If source_dir lies outside root_dir
    """
    source_dir: str
    root_dir: str = ''
    base_url: Optional[str] = None
    alias_divider: str = DEFAULT_ALIAS_DIVIDER
    tag_filter: FrozenSet[str] = field(default_factory=frozenset)
    publish_all: bool = False

    def __post_init__(self):
        if not self.root_dir:
            object.__setattr__(self, 'root_dir', self.source_dir)
        object.__setattr__(self, 'tag_filter', frozenset(self.tag_filter))

        source_dir = os.path.abspath(self.source_dir)
        root_dir = os.path.abspath(self.root_dir)
        if os.path.commonpath([source_dir, root_dir]) != root_dir:
            raise ConfigurationError(f"source_dir {self.source_dir} is not inside root_dir {self.root_dir}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PipelineConfig":
        """Build a config from a plain mapping (e.g. parsed YAML).

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        unknown = set(data) - CONFIG_KEYS
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        source_dir = data.get('source_dir')
        if not source_dir:
            raise ConfigurationError("source_dir is required")

        tags = data.get('tags') or []
        if isinstance(tags, str):
            tags = [tags]
        if not isinstance(tags, list):
            raise ConfigurationError("tags must be a list of strings")

        alias_divider = data.get('alias_divider', DEFAULT_ALIAS_DIVIDER)
        if not isinstance(alias_divider, str) or not alias_divider:
            raise ConfigurationError("alias_divider must be a non-empty string")

        return cls(
            source_dir=str(source_dir).rstrip('/') or '/',
            root_dir=str(data.get('root_dir') or '').rstrip('/'),
            base_url=data.get('base_url') or None,
            alias_divider=alias_divider,
            tag_filter=frozenset(str(t) for t in tags),
            publish_all=bool(data.get('publish_all', False)),
        )


def load_config(path: Union[str, Path]) -> PipelineConfig:
    """Load a PipelineConfig from a YAML file.

    Relative directories are resolved against the config file's directory.

    Raises:
        ConfigurationError: If the file is missing, unparsable or invalid
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding='utf-8'))
    except OSError as e:
        raise ConfigurationError(f"Cannot read config {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {path} must be a mapping")

    for key in ('source_dir', 'root_dir'):
        if data.get(key):
            data[key] = str((path.parent / str(data[key])).resolve())

    return PipelineConfig.from_dict(data)
