"""Source linking — cross-references to upstream generated DTO modules."""

from hubgen.sourcelink.resolver import SourceLinkMap, SourceLinkResolver, resolve, resolve_sync

__all__ = ["SourceLinkMap", "SourceLinkResolver", "resolve", "resolve_sync"]
