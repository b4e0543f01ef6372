"""Concurrency-limited quote fetching over many symbols."""

import asyncio
import logging
from typing import Awaitable, Callable, Iterable, Optional

from livefolio.domain.views import QuoteFailure, QuoteResult
from livefolio.services.quote_chain import QuoteResolver

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 8
DEFAULT_PACING_SECONDS = 0.12


class BoundedBatchFetcher:
    """
    Resolves a quote for every symbol with at most `concurrency` in flight.

    A fixed pool of workers drains a queue of symbols. After each symbol a
    worker sleeps `pacing_seconds` so providers are not hammered. fetch_all()
    returns only once every symbol has a result.
    """

    def __init__(
        self,
        resolver: QuoteResolver,
        concurrency: int = DEFAULT_CONCURRENCY,
        pacing_seconds: float = DEFAULT_PACING_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self._resolver = resolver
        self._concurrency = concurrency
        self._pacing = pacing_seconds
        self._sleep = sleep

    async def fetch_all(self, symbols: Iterable[str]) -> dict[str, QuoteResult]:
        """Return symbol -> QuoteResult for every unique, non-blank symbol."""
        unique = list(dict.fromkeys(s for s in symbols if s and s.strip()))
        if not unique:
            return {}

        queue: asyncio.Queue[str] = asyncio.Queue()
        for symbol in unique:
            queue.put_nowait(symbol)

        results: dict[str, Optional[QuoteResult]] = dict.fromkeys(unique)
        workers = [
            asyncio.create_task(self._worker(queue, results), name=f"quote-worker-{i}")
            for i in range(self._concurrency)
        ]
        await asyncio.gather(*workers)

        failed = sum(1 for r in results.values() if not r.ok)
        logger.info(f"Fetched {len(unique)} quotes ({failed} failed)")
        return results

    async def _worker(
        self,
        queue: asyncio.Queue,
        results: dict[str, Optional[QuoteResult]],
    ) -> None:
        while True:
            try:
                symbol = queue.get_nowait()
            except asyncio.QueueEmpty:
                return

            try:
                results[symbol] = await self._resolver.resolve(symbol)
            except Exception as e:  # noqa: BLE001 - contain failures to one symbol
                logger.error(f"Quote resolution crashed for {symbol}: {e}")
                results[symbol] = QuoteFailure(reason=f"resolver error: {e}")
            finally:
                queue.task_done()

            if self._pacing > 0:
                await self._sleep(self._pacing)
