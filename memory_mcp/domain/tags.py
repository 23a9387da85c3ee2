"""Tag argument parsing."""

from __future__ import annotations


def parse_tag_names(tags: str) -> list[str]:
    """Split a comma-separated tags argument into names.

    Pieces are stripped and empty pieces dropped. Order is preserved and
    duplicates are kept.
    """
    return [name for name in (piece.strip() for piece in tags.split(",")) if name]
