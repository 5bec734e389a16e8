"""Context services."""

from .context_extractor import METHOD_OPERATIONS, ContextExtractor

__all__ = ["METHOD_OPERATIONS", "ContextExtractor"]
