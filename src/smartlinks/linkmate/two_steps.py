"""Two-phase result: an immediate answer plus an optional deferred one."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class TwoStepsResponse(Generic[T]):
    """
    Result with a synchronous half and an asynchronous half.

    Attributes:
        sync_response: Value available immediately, or None
        async_response: Future resolving to the later value, or None when no
            asynchronous work was started

    Example:
        result = mapper.run(anchors)
        if result.sync_response is not None:
            apply(result.sync_response)
        if result.async_response is not None:
            apply(await result.async_response)
    """

    sync_response: Optional[T] = None
    async_response: Optional[asyncio.Future[Optional[T]]] = None

    @property
    def is_pending(self) -> bool:
        """True while the asynchronous half is still running."""
        return self.async_response is not None and not self.async_response.done()

    async def resolve(self) -> Optional[T]:
        """
        Await the asynchronous half.

        Returns:
            The asynchronous value, or None if no asynchronous work was started
        """
        if self.async_response is None:
            return None
        return await self.async_response
