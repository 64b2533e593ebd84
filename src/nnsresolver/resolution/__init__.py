"""Name resolution: fallback pipeline, caching, batching."""

from nnsresolver.resolution.batch import BatchResolutionResult, BatchResolver
from nnsresolver.resolution.cache import FORWARD, REVERSE, ResolutionCache
from nnsresolver.resolution.resolver import NameResolver

__all__ = [
    "BatchResolutionResult",
    "BatchResolver",
    "FORWARD",
    "NameResolver",
    "REVERSE",
    "ResolutionCache",
]
