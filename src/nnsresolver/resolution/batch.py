"""
Batch Resolver.

Resolves many EIP-3770 identifiers concurrently.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Sequence

from nnsresolver.core.logging import get_logger
from nnsresolver.core.types import ResolvedAddress

logger = get_logger("resolution.batch")

ResolveFn = Callable[[str], Awaitable[ResolvedAddress | None]]


@dataclass
class BatchResolutionResult:
    """Result of a batch resolution, in input order."""

    results: list[ResolvedAddress | None]
    errors: dict[int, str] = field(default_factory=dict)

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def resolved_count(self) -> int:
        return sum(1 for r in self.results if r is not None)

    @property
    def failed_count(self) -> int:
        return len(self.errors)


class BatchResolver:
    """Runs a resolve function over many inputs with bounded concurrency."""

    def __init__(self, resolve_fn: ResolveFn, concurrency: int = 10) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self._resolve = resolve_fn
        self._concurrency = concurrency

    async def process(self, identifiers: Sequence[str]) -> BatchResolutionResult:
        """
        Resolve every identifier.

        Output position i always corresponds to input position i. Any
        exception raised for one input becomes None at its position and is
        recorded in `errors`; the others are unaffected.
        """
        sem = asyncio.Semaphore(self._concurrency)

        async def _bounded(identifier: str) -> ResolvedAddress | None:
            async with sem:
                return await self._resolve(identifier)

        outcomes = await asyncio.gather(
            *(_bounded(identifier) for identifier in identifiers),
            return_exceptions=True,
        )

        results: list[ResolvedAddress | None] = []
        errors: dict[int, str] = {}
        for i, outcome in enumerate(outcomes):
            if isinstance(outcome, Exception):
                logger.warning(f"Batch entry {i} ({identifiers[i]!r}) failed: {outcome}")
                errors[i] = str(outcome)
                results.append(None)
            elif isinstance(outcome, BaseException):
                raise outcome
            else:
                results.append(outcome)

        logger.debug(f"Batch resolved {sum(1 for r in results if r)}/{len(results)}")
        return BatchResolutionResult(results=results, errors=errors)


__all__ = ["BatchResolver", "BatchResolutionResult"]
