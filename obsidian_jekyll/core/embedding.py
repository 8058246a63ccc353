"""Classification of embedded files by extension."""

import re
from enum import Enum
from typing import List, Tuple


class EmbedType(str, Enum):
    """Media category of an embedding wikilink target."""
    IMG = "img"
    AUDIO = "audio"
    VIDEO = "video"
    PDF = "pdf"
    NOTE = "note"
    UNDEFINED = "undefined"


def _suffixes(*exts: str) -> List["re.Pattern[str]"]:
    return [re.compile(re.escape(ext) + r'$') for ext in exts]


# Order matters: .webm is both audio and video, audio wins.
EMBED_TYPES: List[Tuple[EmbedType, List["re.Pattern[str]"]]] = [
    (EmbedType.IMG, _suffixes('.jpg', '.jpeg', '.png', '.gif', '.bmp', '.svg')),
    (EmbedType.AUDIO, _suffixes('.mp3', '.webm', '.wav', '.m4a', '.ogg', '.3gp', '.flac')),
    (EmbedType.VIDEO, _suffixes('.mp4', '.webm', '.ogv', '.mov', '.mkv')),
    (EmbedType.PDF, _suffixes('.pdf')),
    (EmbedType.NOTE, _suffixes('.md', '.markdown')),
]


def classify_embedding(target: str) -> EmbedType:
    """Map an embedding target to its media category.

    Args:
        target: Raw wikilink target, e.g. ``photo.jpg``

    Returns:
        The first matching EmbedType, or EmbedType.UNDEFINED
    """
    for embed_type, patterns in EMBED_TYPES:
        if any(p.search(target) for p in patterns):
            return embed_type
    return EmbedType.UNDEFINED
