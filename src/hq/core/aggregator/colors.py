"""Deterministic color assignment."""

import hashlib

from hq.core.config.models import DEFAULT_PALETTE


def pick_color(name: str, palette: list[str] | None = None) -> str:
    """Hash a repository name into the palette; stable across runs."""
    colors = palette or DEFAULT_PALETTE
    digest = hashlib.sha1(name.encode("utf-8")).hexdigest()
    return colors[int(digest, 16) % len(colors)]
