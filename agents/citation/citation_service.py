"""Citation enhancement for extracted precedents.

Single lookups go through a process-wide cache keyed by the exact case name.
Bulk lookups are deduplicated and resolved in fixed-size batches: every name in
a batch is resolved concurrently, and the next batch starts only after the
previous one has finished, which bounds the number of in-flight model calls.
"""
import asyncio
from collections import OrderedDict
from typing import Dict, Iterable, List, Optional

from agents.citation.citation_agent import enhance_citation_flow
from common.config import Config
from common.logging import logger

CITATION_ENHANCEMENT_FAILED = "Citation enhancement failed"


class CitationCache:
    """Case name -> citation map.

    Unbounded when ``max_entries`` is 0, otherwise least recently used entries
    are evicted. There is no lock: the cache is only touched from the event loop.
    """

    def __init__(self, max_entries: int = 0):
        self.max_entries = max_entries
        self._entries: "OrderedDict[str, str]" = OrderedDict()

    def has(self, case_name: str) -> bool:
        return case_name in self._entries

    def get(self, case_name: str) -> Optional[str]:
        citation = self._entries.get(case_name)
        if citation is not None and self.max_entries:
            self._entries.move_to_end(case_name)
        return citation

    def set(self, case_name: str, citation: str) -> None:
        self._entries[case_name] = citation
        self._entries.move_to_end(case_name)
        if self.max_entries and len(self._entries) > self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.info(f"Citation cache full, evicted {evicted}")

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, case_name: str) -> bool:
        return self.has(case_name)

    def __len__(self) -> int:
        return len(self._entries)


# Global cache instance
citation_cache = CitationCache(max_entries=Config.CITATION_CACHE_MAX_ENTRIES)

# Lookups currently awaiting the model, by case name
_in_flight: Dict[str, "asyncio.Future[str]"] = {}


def is_usable_citation(citation: Optional[str]) -> bool:
    """True unless the lookup came back empty or failed."""
    return bool(citation) and citation != CITATION_ENHANCEMENT_FAILED


def make_batches(items: List[str], batch_size: int) -> List[List[str]]:
    if batch_size < 1:
        raise ValueError("batch_size must be at least 1")
    return [items[i:i + batch_size] for i in range(0, len(items), batch_size)]


async def _resolve_citation(case_name: str) -> str:
    try:
        result = await enhance_citation_flow(case_name)
    except Exception as e:
        logger.error(f"Error enhancing citation for {case_name!r}: {e}")
        return CITATION_ENHANCEMENT_FAILED
    finally:
        _in_flight.pop(case_name, None)

    citation_cache.set(case_name, result.citation)
    return result.citation


async def enhance_citation(case_name: str) -> str:
    """Resolve one case name to a formal citation, consulting the cache first.

    Never raises: a failed model call yields CITATION_ENHANCEMENT_FAILED and
    is not cached, so a later request for the same name tries again.
    Concurrent requests for a name that is still being resolved wait on the
    same lookup instead of starting another one.
    """
    if citation_cache.has(case_name):
        return citation_cache.get(case_name)

    task = _in_flight.get(case_name)
    if task is None:
        task = asyncio.ensure_future(_resolve_citation(case_name))
        _in_flight[case_name] = task
    return await task


async def enhance_citations(case_names: Iterable[str], batch_size: int = None) -> Dict[str, str]:
    """Resolve many case names; returns one entry per distinct name."""
    unique_case_names = list(dict.fromkeys(case_names))
    results: Dict[str, str] = {}

    batches = make_batches(unique_case_names, batch_size or Config.CITATION_BATCH_SIZE)
    for batch in batches:
        citations = await asyncio.gather(*(enhance_citation(name) for name in batch))
        results.update(zip(batch, citations))

    logger.info(f"Enhanced {len(results)} citations in {len(batches)} batches")
    return results
